"""CLI subcommands for bumpbot.

Provides register_commands() with deferred imports to keep ``bumpbot --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the root CLI group."""
    from bumpbot.commands.list_cmd import list_commands
    from bumpbot.commands.push import push
    from bumpbot.commands.say import say

    cli.add_command(say)
    cli.add_command(push)
    cli.add_command(list_commands)
