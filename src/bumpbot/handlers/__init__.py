"""Per-invocation handler state."""

from bumpbot.handlers.context import InvocationContext

__all__ = ["InvocationContext"]
