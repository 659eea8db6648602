"""AppContext — shared Click context for all CLI commands.

Created once by the root group and handed to subcommands via
``@click.pass_obj``. Builds the command router lazily so ``--help`` never
loads plugins, and maps dispatch outcomes to exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bumpbot.domain.ids import InvocationIdAllocator

if TYPE_CHECKING:
    from bumpbot.config.settings import BumpbotSettings
    from bumpbot.services.dispatch import CommandRouter
    from bumpbot.services.result import DispatchResult
    from bumpbot.transport.console import ConsoleRobot


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: BumpbotSettings) -> None:
        self.settings = settings
        self.allocator = InvocationIdAllocator()
        self._router: CommandRouter | None = None

        from bumpbot.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def channels(self) -> list[str]:
        """Channel names the console robot can resolve."""
        names = [self.settings.default_inform_channel]
        names.extend(p.inform_channel for p in self.settings.projects.values() if p.inform_channel)
        return names

    def robot(self) -> ConsoleRobot:
        from bumpbot.transport.console import ConsoleRobot

        return ConsoleRobot(self.channels())

    @property
    def router(self) -> CommandRouter:
        """The command router with built-in and entry-point plugins loaded."""
        if self._router is None:
            from bumpbot.plugins.builtins.build import BuildCommandsPlugin
            from bumpbot.plugins.manager import PluginManager
            from bumpbot.services.dispatch import CommandRouter

            plugins = PluginManager()
            plugins.register_plugin(BuildCommandsPlugin(), name="builtin-build")
            plugins.discover()
            self._router = CommandRouter(
                self.settings,
                self.robot(),
                allocator=self.allocator,
                plugins=plugins,
            )
            self._router.load_plugins()
        return self._router

    def exit_for(self, result: DispatchResult | None) -> None:
        """Exit 1 unless the invocation completed."""
        if result is None or not result.ok:
            raise SystemExit(1)
