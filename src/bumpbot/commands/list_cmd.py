"""Command: list the chat commands the bot understands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bumpbot.commands._base import BotCommand

if TYPE_CHECKING:
    from bumpbot.commands._context import AppContext


@click.command("commands", cls=BotCommand)
@click.pass_obj
def list_commands(app: AppContext) -> None:
    """Print usage for every registered chat command."""
    for definition in app.router.definitions:
        for usage, description in definition.help:
            click.echo(f"{usage}   - {description}")
