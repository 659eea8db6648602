"""Process-wide log output for bumpbot.

Everything in the package logs through stdlib ``logging``. Handler output
arrives on ``bumpbot.handler`` already carrying its ``<handler>{project}``
prefix, so this module only decides how records are rendered: structlog's
ProcessorFormatter turns them into console lines, or into one JSON object
per line with ``--log-json``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

BOT_LOGGER = "bumpbot"

# Request-level chatter from the Jenkins client.
QUIET_LOGGERS = ("httpx", "httpcore")


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def build_formatter(
    *, log_json: bool = False, colors: bool = False
) -> structlog.stdlib.ProcessorFormatter:
    """Formatter for stdlib records; JSON output renders tracebacks as a string field."""
    tail: list[structlog.types.Processor]
    if log_json:
        tail = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        tail = [structlog.dev.ConsoleRenderer(colors=colors)]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Send all log records to *stream* (stderr by default) through one handler.

    Args:
        verbose: DEBUG for the ``bumpbot`` loggers; WARNING otherwise.
        log_json: JSON lines instead of console lines.
        stream: Output stream, resolved at call time so test runners can capture it.
    """
    out = stream or sys.stderr
    handler = logging.StreamHandler(out)
    handler.setFormatter(build_formatter(log_json=log_json, colors=not log_json and out.isatty()))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(BOT_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
