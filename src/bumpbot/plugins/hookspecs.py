"""Pluggy hook specifications for bumpbot.

One setup-time hook lets plugins add chat commands; one lifecycle hook
observes every finished invocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from bumpbot.services.dispatch import CommandRouter
    from bumpbot.services.result import DispatchResult

hookspec = pluggy.HookspecMarker("bumpbot")


class BumpbotHookSpec:
    """Hook specifications for the bumpbot plugin system."""

    @hookspec
    def register_commands(self, router: CommandRouter) -> None:
        """Register chat commands on *router* (called once at setup)."""

    @hookspec
    def post_dispatch(self, outcome: DispatchResult) -> None:
        """Called after an invocation's sandbox epilogue has run."""
