"""Invocation identity allocation.

Every invocation (chat command or event) gets an id from a shared
:class:`InvocationIdAllocator`. The id names the invocation in logs and
namespaces its sandbox directory, so it must be unique and ordered even
when invocations start concurrently.
"""

from __future__ import annotations

import threading


class InvocationIdAllocator:
    """Thread-safe monotonic counter producing invocation ids.

    One allocator is created per process and injected wherever
    invocations are constructed. Ids are decimal strings starting at ``"1"``.
    """

    def __init__(self, start: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = start
        self._last: str | None = None

    def next_id(self) -> str:
        """Claim the next id.

        INVARIANT: every returned value is strictly greater than all
        previously returned values, under any interleaving of callers.
        """
        with self._lock:
            self._value += 1
            self._last = str(self._value)
            return self._last

    @property
    def last_id(self) -> str | None:
        """The most recently issued id, or None before the first claim."""
        with self._lock:
            return self._last
