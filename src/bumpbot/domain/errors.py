"""Two-tier invocation error taxonomy.

*Already reported* failures have had their message delivered to the user
before they propagate; the dispatch boundary ends the invocation quietly.
Anything else reaching the boundary is *unhandled* and gets reported there.
"""

from __future__ import annotations


class InvocationError(Exception):
    """A failure detected while running an invocation.

    Attributes:
        message: Human-readable failure text.
        already_reported: Whether ``message`` has already reached the user.
        cause: The underlying exception, if any.
    """

    already_reported: bool = False

    def __init__(self, message: str = "", cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ErrorAlreadyReported(InvocationError):
    """Raised after the failure message was sent to every output sink."""

    already_reported = True
