"""Dispatch outcomes — what the dispatch boundary made of an invocation.

INVARIANT: every dispatched command or event yields exactly one of
:class:`Completed`, :class:`Recovered` or :class:`Unhandled`. The boundary
decides sandbox cleanup and reporting by the outcome's type alone.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class _Outcome(BaseModel):
    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    handler_id: str
    handler_name: str
    project_name: str | None = None
    sandbox_directory: Path

    @property
    def ok(self) -> bool:
        return False


class Completed(_Outcome):
    """Handler logic ran to the end."""

    @property
    def ok(self) -> bool:
        return True


class Recovered(_Outcome):
    """Failed with a message that was already delivered to the user."""

    message: str


class Unhandled(_Outcome):
    """Failed with an exception nobody reported.

    Attributes:
        error: The exception that escaped the handler logic.
        report: Formatted message (input, error text, traceback) sent to the user.
    """

    error: Exception
    report: str


DispatchResult = Completed | Recovered | Unhandled
