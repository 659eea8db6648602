"""Message routing: where does an invocation's output go?

- Chat commands are answered on the originating message (``reply``).
- Events have no message to answer, so output goes to the project's
  ``inform_channel``, or the default inform channel when it has none.
- HTTP-originated invocations also collect every message in the response body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bumpbot.handlers.context import InvocationContext
    from bumpbot.transport.ports import ChatRoom


class MessageRouter:
    """Deliver messages for one invocation."""

    def __init__(self, ctx: InvocationContext) -> None:
        self._ctx = ctx

    def send_message(self, message: str) -> None:
        ctx = self._ctx
        if ctx.response is not None:
            ctx.response.reply(message)
        else:
            room = self.message_source()
            if room is not None:
                ctx.robot.send_message(room, message)
        if ctx.http_response is not None:
            if not message.endswith("\n"):
                message = f"{message}\n"
            ctx.http_response.write(message)

    def message_source(self) -> ChatRoom | None:
        """Channel for broadcasts, resolved once per invocation."""
        ctx = self._ctx
        project = ctx.project
        if project is not None and project.inform_channel:
            channel = project.inform_channel
            return ctx.cached_room("project", lambda: self.source_by_name(channel))
        channel = ctx.settings.default_inform_channel
        return ctx.cached_room("default", lambda: self.source_by_name(channel))

    def source_by_name(self, channel_name: str) -> ChatRoom | None:
        room = self._ctx.robot.find_room(channel_name)
        if room is None:
            self._ctx.log_each_line(logging.ERROR, f"Unable to resolve #{channel_name}.")
        return room
