"""Terminal chat transport.

Replies and channel broadcasts are rendered with Rich into a StringIO
buffer and written with ``click.echo`` so Click's test runner captures
them. In non-TTY environments Rich drops colour codes automatically.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from io import StringIO

import click
from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from bumpbot.transport.ports import ChatRoom

BOT_THEME = Theme(
    {
        "bot.user": "bold cyan",
        "bot.room": "bold magenta",
        "bot.error": "bold red",
        "bot.warning": "bold yellow",
    }
)

Writer = Callable[[str], None]


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=BOT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_line(label: str, label_style: str, message: str) -> str:
    """Render ``label: message`` with the message styled by its severity prefix."""
    console = create_console()
    style = ""
    if message.startswith("**ERROR:**"):
        style = "bot.error"
    elif message.startswith("WARN:"):
        style = "bot.warning"
    text = escape(message)
    body = f"[{style}]{text}[/{style}]" if style else text
    console.print(f"[{label_style}]{escape(label)}[/{label_style}]: {body}", soft_wrap=True)
    return get_output(console).rstrip("\n")


def _echo(text: str) -> None:
    click.echo(text)


class ConsoleResponse:
    """A chat line typed at the terminal."""

    def __init__(
        self,
        body: str,
        *,
        user_name: str = "console",
        private_message: bool = True,
        writer: Writer = _echo,
    ) -> None:
        self._body = body
        self._user_name = user_name
        self._private = private_message
        self._writer = writer

    @property
    def body(self) -> str:
        return self._body

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def private_message(self) -> bool:
        return self._private

    def reply(self, message: str) -> None:
        self._writer(render_line(f"@{self._user_name}", "bot.user", message))


class ConsoleRobot:
    """Robot whose rooms are the channel names known to the configuration."""

    def __init__(self, channels: Iterable[str], *, writer: Writer = _echo) -> None:
        self._rooms: dict[str, ChatRoom] = {}
        for name in channels:
            key = name.lstrip("#")
            if key:
                self._rooms[key] = ChatRoom(id=key, name=key)
        self._writer = writer

    @property
    def rooms(self) -> list[ChatRoom]:
        return list(self._rooms.values())

    def find_room(self, name: str) -> ChatRoom | None:
        """Match by exact name first, then case-insensitively; ``#`` is optional."""
        wanted = name.lstrip("#")
        if wanted in self._rooms:
            return self._rooms[wanted]
        lowered = wanted.lower()
        for room_name, room in self._rooms.items():
            if room_name.lower() == lowered:
                return room
        return None

    def send_message(self, room: ChatRoom, message: str) -> None:
        self._writer(render_line(f"#{room.name}", "bot.room", message))
