"""Bounded-timeout execution of external commands."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

DEFAULT_TIMEOUT = 3600


class ShellCommandError(RuntimeError):
    """Raised when a command exits non-zero, times out, or cannot start."""

    def __init__(
        self,
        message: str,
        *,
        command: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


def display_command(command: str | Sequence[str]) -> str:
    """Render *command* as a single shell-quoted string."""
    if isinstance(command, str):
        return command
    return shlex.join(command)


def run_command(
    command: str | Sequence[str],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run *command* to completion and return the finished process.

    A string command runs through the shell; a sequence runs directly.

    Raises:
        ShellCommandError: On non-zero exit, timeout, or a missing executable.
    """
    shown = display_command(command)
    try:
        proc = subprocess.run(
            command,
            shell=isinstance(command, str),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise ShellCommandError(
            f"Command timed out after {timeout}s: {shown}",
            command=shown,
            stdout=_text(exc.stdout),
            stderr=_text(exc.stderr),
        ) from exc
    except OSError as exc:
        raise ShellCommandError(f"Could not run {shown}: {exc}", command=shown) from exc

    if proc.returncode != 0:
        raise ShellCommandError(
            f"Command exited with status {proc.returncode}: {shown}\n{proc.stderr}".rstrip(),
            command=shown,
            stdout=proc.stdout,
            stderr=proc.stderr,
            returncode=proc.returncode,
        )
    return proc


def _text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
