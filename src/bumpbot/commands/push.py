"""Command: run the push event as a repository webhook would."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bumpbot.commands._base import BotCommand

if TYPE_CHECKING:
    from bumpbot.commands._context import AppContext


@click.command(
    cls=BotCommand,
    examples="""\
  bumpbot push harmony main
  bumpbot push harmony refs/tags/v1.2.0""",
)
@click.argument("project")
@click.argument("git_ref")
@click.pass_obj
def push(app: AppContext, project: str, git_ref: str) -> None:
    """Handle a push of GIT_REF to PROJECT; prints the HTTP status and body."""
    from bumpbot.plugins.builtins.build import push_event
    from bumpbot.transport.ports import HttpResponse

    http_response = HttpResponse()
    result = app.router.handle_event(
        "push",
        lambda ctx: push_event(ctx, project, git_ref),
        http_response=http_response,
    )
    click.echo(f"HTTP {http_response.status}")
    click.echo(http_response.text, nl=False)
    app.exit_for(result)
