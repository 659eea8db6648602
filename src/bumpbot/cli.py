"""Root CLI group for bumpbot with global flags and command registration."""

from __future__ import annotations

import click

from bumpbot import __version__
from bumpbot.commands import register_commands
from bumpbot.commands._context import AppContext
from bumpbot.config.settings import BumpbotSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="bumpbot")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_json: bool, config_path: str | None) -> None:
    """bumpbot — trigger builds from chat commands."""
    ctx.ensure_object(dict)
    settings = BumpbotSettings.from_cli(
        config_path=config_path,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
