"""InvocationContext — the state of one command or event invocation.

A context is created by the :class:`~bumpbot.services.dispatch.CommandRouter`
for every inbound command or event and discarded when the dispatch boundary
exits. Nothing on it is shared with other invocations, so it needs no
locking; the only shared resource is the id allocator that named it.

Handler logic receives the context and uses it for everything it does:
reporting (``info``/``warn``/``error``/``raise_error``/``debug``), starting
builds, running commands inside the sandbox.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from bumpbot.infrastructure import shell
from bumpbot.services.build import BuildTrigger
from bumpbot.services.reporting import Reporter
from bumpbot.services.routing import MessageRouter

if TYPE_CHECKING:
    from bumpbot.config.models import ProjectConfig
    from bumpbot.config.settings import BumpbotSettings
    from bumpbot.infrastructure.sandbox import SandboxManager
    from bumpbot.transport.ports import ChatResponse, ChatRobot, ChatRoom, HttpResponse


class InvocationContext:
    """Per-invocation state plus the operations handler logic may use.

    Attributes:
        handler_id: Unique, monotonically increasing invocation id.
        handler_name: Command name, or event title for event invocations.
        project_name: Project token of the command (set by event bodies).
        response: Chat message being answered, None for events.
        http_response: Bound HTTP response, when the invocation came over HTTP.
    """

    def __init__(
        self,
        handler_id: str,
        *,
        settings: BumpbotSettings,
        robot: ChatRobot,
        sandbox: SandboxManager,
        builds: BuildTrigger | None = None,
        handler_name: str = "",
        response: ChatResponse | None = None,
        http_response: HttpResponse | None = None,
    ) -> None:
        self.handler_id = handler_id
        self.settings = settings
        self.robot = robot
        self.handler_name = handler_name
        self.response = response
        self.http_response = http_response
        self.project_name: str | None = None

        self._sandbox = sandbox
        self._builds = builds or BuildTrigger(settings)
        self._sandbox_directory: Path | None = None
        self._rooms: dict[str, ChatRoom | None] = {}
        self._reporter = Reporter(self)
        self._messages = MessageRouter(self)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @property
    def projects(self) -> Mapping[str, ProjectConfig]:
        return self.settings.projects

    @property
    def project(self) -> ProjectConfig | None:
        """Configuration of the current project, None if unset or unknown."""
        if self.project_name is None:
            return None
        return self.projects.get(self.project_name)

    # ------------------------------------------------------------------
    # Sandbox
    # ------------------------------------------------------------------

    @property
    def sandbox_directory(self) -> Path:
        """This invocation's sandbox, created empty on first access."""
        if self._sandbox_directory is None:
            self._sandbox_directory = self._sandbox.prepare(self.handler_id)
        return self._sandbox_directory

    @property
    def sandbox_path(self) -> Path:
        """Where the sandbox lives, without creating it."""
        return self._sandbox_directory or self._sandbox.path_for(self.handler_id)

    def cleanup(self) -> None:
        self._sandbox.cleanup(self.handler_id)
        self._sandbox_directory = None

    # ------------------------------------------------------------------
    # Channel cache
    # ------------------------------------------------------------------

    def cached_room(
        self, key: str, resolve: Callable[[], ChatRoom | None]
    ) -> ChatRoom | None:
        """Return the room cached under *key*, resolving it on first use.

        A failed resolution (None) is cached too.
        """
        if key not in self._rooms:
            self._rooms[key] = resolve()
        return self._rooms[key]

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def error(self, message: str, status: str = "500") -> None:
        self._reporter.error(message, status=status)

    def raise_error(self, message: str, status: str = "500") -> NoReturn:
        self._reporter.raise_error(message, status=status)

    def warn(self, message: str) -> None:
        self._reporter.warn(message)

    def info(self, message: str) -> None:
        self._reporter.info(message)

    def debug(self, message: str) -> None:
        self._reporter.debug(message)

    def log_each_line(self, level: int, message: object) -> None:
        self._reporter.log_each_line(level, message)

    def send_message(self, message: str) -> None:
        self._messages.send_message(message)

    # ------------------------------------------------------------------
    # External work
    # ------------------------------------------------------------------

    def trigger_build(self, pipeline: str, git_ref: str) -> bool:
        return self._builds.trigger_build(self, pipeline, git_ref)

    def run_command(
        self,
        command: str | Sequence[str],
        *,
        timeout: float | None = None,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run *command* (in the sandbox by default), logging its output at debug.

        Raises:
            ShellCommandError: On failure or after *timeout* seconds
                (default: ``settings.command_timeout``).
        """
        if timeout is None:
            timeout = self.settings.command_timeout
        workdir = cwd or self.sandbox_directory
        self.debug(
            f'Running "{shell.display_command(command)}" with timeout={timeout} cwd={workdir}'
        )
        proc = shell.run_command(command, timeout=timeout, cwd=workdir, env=env)
        self.debug(f"STDOUT:\n```{proc.stdout}```\n")
        if proc.stderr:
            self.debug(f"STDERR:\n```{proc.stderr}```\n")
        return proc
