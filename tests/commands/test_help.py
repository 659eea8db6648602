"""Help and --examples output for every subcommand."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from bumpbot.cli import cli

HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["say", "push", "commands"]),
    (["say", "--help"], ["WORDS", "--user", "--private / --public"]),
    (["push", "--help"], ["PROJECT", "GIT_REF"]),
    (["commands", "--help"], ["registered chat command"]),
]

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["say", "--examples"], ["bumpbot say build harmony", "--public --user alice"]),
    (["push", "--examples"], ["bumpbot push harmony main"]),
]


@pytest.mark.usefixtures("_isolated_config")
@pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.usefixtures("_isolated_config")
@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.usefixtures("_isolated_config")
def test_commands_without_examples_have_no_flag(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["commands", "--examples"])
    assert result.exit_code == 2
