"""Protocols for the chat transport and the HTTP response binding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class ChatRoom:
    """A resolved chat channel."""

    id: str
    name: str


class ChatResponse(Protocol):
    """An inbound chat message the bot can reply to."""

    @property
    def body(self) -> str:
        """Full message text, e.g. ``"build harmony main"``."""
        ...

    @property
    def user_name(self) -> str:
        """Mention name of the sender."""
        ...

    @property
    def private_message(self) -> bool:
        """Whether the message arrived as a direct message."""
        ...

    def reply(self, message: str) -> None:
        """Answer the sender where the message came from."""
        ...


class ChatRobot(Protocol):
    """Outbound side of the chat transport."""

    def find_room(self, name: str) -> ChatRoom | None:
        """Fuzzy-resolve a channel by name. None when nothing matches."""
        ...

    def send_message(self, room: ChatRoom, message: str) -> None:
        """Broadcast *message* to *room*."""
        ...


@dataclass
class HttpResponse:
    """Response under construction for an HTTP-originated invocation."""

    status: str = "200"
    body: list[str] = field(default_factory=list)

    def write(self, chunk: str) -> None:
        self.body.append(chunk)

    @property
    def text(self) -> str:
        return "".join(self.body)
