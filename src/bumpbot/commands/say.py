"""Command: deliver one chat line to the bot from the terminal."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

import click

from bumpbot.commands._base import BotCommand

if TYPE_CHECKING:
    from bumpbot.commands._context import AppContext


@click.command(
    cls=BotCommand,
    examples="""\
  bumpbot say build harmony
  bumpbot say build harmony v1.2.0
  bumpbot say --public --user alice info harmony""",
)
@click.argument("words", nargs=-1, required=True)
@click.option("--user", default="console", show_default=True, help="Sender mention name.")
@click.option(
    "--private/--public",
    default=True,
    help="Send as a direct message (debug lines are echoed) or in a channel.",
)
@click.pass_obj
def say(app: AppContext, words: tuple[str, ...], user: str, private: bool) -> None:
    """Send WORDS to the bot as a chat message, e.g. ``build PROJECT``."""
    from bumpbot.transport.console import ConsoleResponse

    text = shlex.join(words)
    result = app.router.dispatch(ConsoleResponse(text, user_name=user, private_message=private))
    if result is None:
        click.echo(f"No command matches {text!r}. Try 'bumpbot commands'.", err=True)
    app.exit_for(result)
