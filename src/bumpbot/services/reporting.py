"""Multi-sink reporting for an invocation.

Every message goes to the user (see :mod:`bumpbot.services.routing`) and to
the process log. Log lines carry a ``<handler>{project} `` prefix so
interleaved output from concurrent invocations can be told apart in syslog.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn

from bumpbot.domain.errors import ErrorAlreadyReported

if TYPE_CHECKING:
    from bumpbot.handlers.context import InvocationContext

logger = logging.getLogger("bumpbot.handler")


class Reporter:
    """Error/warn/info/debug emission bound to one invocation."""

    def __init__(self, ctx: InvocationContext) -> None:
        self._ctx = ctx

    def error(self, message: str, *, status: str = "500") -> None:
        """Report *message* as an error to every sink.

        Sets the bound HTTP response's status to *status*.
        """
        if self._ctx.http_response is not None:
            self._ctx.http_response.status = status
        self._ctx.send_message(f"**ERROR:** {message}")
        self.log_each_line(logging.ERROR, message)

    def raise_error(self, message: str, *, status: str = "500") -> NoReturn:
        """Report *message* and abort the invocation.

        Raises:
            ErrorAlreadyReported: Always, so the dispatch boundary does not
                report the failure a second time.
        """
        self.error(message, status=status)
        raise ErrorAlreadyReported(message)

    def warn(self, message: str) -> None:
        self._ctx.send_message(f"WARN: {message}")
        self.log_each_line(logging.WARNING, message)

    def info(self, message: str) -> None:
        self._ctx.send_message(message)
        self.log_each_line(logging.INFO, message)

    def debug(self, message: str) -> None:
        # Debug lines only reach users who talk to the bot privately.
        response = self._ctx.response
        if (
            response is not None
            and response.private_message
            and self._ctx.settings.debug_lines_in_pm
        ):
            self._ctx.send_message(message)
        self.log_each_line(logging.DEBUG, message)

    def log_each_line(self, level: int, message: object) -> None:
        prefix = f"<{self._ctx.handler_name}>{{{self._ctx.project_name or 'unknown'}}} "
        for line in str(message).splitlines():
            logger.log(level, "%s%s", prefix, line)
