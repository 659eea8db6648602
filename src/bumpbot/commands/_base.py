"""Click Command subclass with ``--examples`` support.

``--help`` stays short; ``--examples`` prints sample invocations and exits.
"""

from __future__ import annotations

from typing import Any

import click


class BotCommand(click.Command):
    """Click Command that accepts an ``examples`` text."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)
