"""Per-invocation sandbox directories.

Layout: ``{sandbox_root}/{invocation_id}/``. Ids are unique per process,
so concurrent invocations sharing one root never touch each other's
directories and the manager itself holds no mutable state.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class SandboxManager:
    """Create and tear down sandbox directories under *root*."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def path_for(self, invocation_id: str) -> Path:
        """Sandbox path for *invocation_id*. No filesystem access."""
        return self._root / invocation_id

    def prepare(self, invocation_id: str) -> Path:
        """Wipe any stale contents and create an empty sandbox directory."""
        path = self.path_for(invocation_id)
        shutil.rmtree(path, ignore_errors=True)
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("Prepared sandbox %s", path)
        return path

    def cleanup(self, invocation_id: str) -> None:
        """Recursively remove the sandbox for *invocation_id*, if present."""
        path = self.path_for(invocation_id)
        if path.exists():
            shutil.rmtree(path)
            logger.debug("Removed sandbox %s", path)
