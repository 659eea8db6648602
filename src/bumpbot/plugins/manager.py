"""Plugin discovery and loading.

Discovery: entry points (pip-installed) in the ``bumpbot.plugins`` group,
plus built-in plugins registered directly by the CLI.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from bumpbot.plugins.hookspecs import BumpbotHookSpec

PROJECT_NAME = "bumpbot"
ENTRY_POINT_GROUP = "bumpbot.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BumpbotHookSpec)

    def discover(self) -> list[str]:
        """Load entry-point plugins and return all registered plugin names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_classes()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def _instantiate_classes(self) -> None:
        """Replace plugin classes loaded from entry points with instances.

        Hook dispatch against a class leaves ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
