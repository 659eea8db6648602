"""Shared pytest fixtures and fakes for bumpbot tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from bumpbot.config.settings import BumpbotSettings
from bumpbot.domain.ids import InvocationIdAllocator
from bumpbot.handlers.context import InvocationContext
from bumpbot.infrastructure.sandbox import SandboxManager
from bumpbot.services.dispatch import CommandRouter
from bumpbot.transport.ports import ChatRoom

PROJECTS = {
    "harmony": {"inform_channel": "harmony-notify", "pipeline": "harmony-trigger-ad_hoc"},
    "omnibus": {},
    "ghost": {"inform_channel": "no-such-channel"},
}

TOML_CONFIG = """\
default_inform_channel = "chef-notify"

[jenkins]
username = "bumpbot"
api_token = "secret"

[projects.harmony]
inform_channel = "harmony-notify"
pipeline = "harmony-trigger-ad_hoc"

[projects.omnibus]
"""


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeResponse:
    """Chat message that records replies."""

    def __init__(self, body: str, *, user_name: str = "alice", private_message: bool = False):
        self.body = body
        self.user_name = user_name
        self.private_message = private_message
        self.replies: list[str] = []

    def reply(self, message: str) -> None:
        self.replies.append(message)


class FakeRobot:
    """Robot that knows a fixed set of rooms and records broadcasts."""

    def __init__(self, room_names: tuple[str, ...] = ("chef-notify", "harmony-notify")) -> None:
        self.rooms = {name: ChatRoom(id=name, name=name) for name in room_names}
        self.sent: list[tuple[str, str]] = []
        self.lookups: list[str] = []

    def find_room(self, name: str) -> ChatRoom | None:
        self.lookups.append(name)
        return self.rooms.get(name)

    def send_message(self, room: ChatRoom, message: str) -> None:
        self.sent.append((room.name, message))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's BUMPBOT_* environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("BUMPBOT_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI tests."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    bot = logging.getLogger("bumpbot")
    bot_level = bot.level
    yield
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    bot.setLevel(bot_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sandbox_root(tmp_path: Path) -> Path:
    return tmp_path / "sandbox"


@pytest.fixture
def settings(sandbox_root: Path, tmp_path: Path) -> BumpbotSettings:
    return BumpbotSettings(
        sandbox_directory=sandbox_root,
        cache_directory=tmp_path / "cache",
        projects=PROJECTS,
    )


@pytest.fixture
def robot() -> FakeRobot:
    return FakeRobot()


@pytest.fixture
def sandbox(sandbox_root: Path) -> SandboxManager:
    return SandboxManager(sandbox_root)


@pytest.fixture
def router(settings: BumpbotSettings, robot: FakeRobot) -> CommandRouter:
    return CommandRouter(settings, robot, allocator=InvocationIdAllocator())


@pytest.fixture
def make_context(settings: BumpbotSettings, robot: FakeRobot, sandbox: SandboxManager):
    """Factory for standalone InvocationContexts."""
    allocator = InvocationIdAllocator()

    def _make(
        *,
        project_name: str | None = "harmony",
        handler_name: str = "test",
        **kwargs,
    ) -> InvocationContext:
        ctx = InvocationContext(
            allocator.next_id(),
            settings=kwargs.pop("settings", settings),
            robot=robot,
            sandbox=sandbox,
            handler_name=handler_name,
            **kwargs,
        )
        ctx.project_name = project_name
        return ctx

    return _make


@pytest.fixture
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a bumpbot.toml into a temp dir and chdir there.

    The sandbox root is pointed into the temp dir through the environment.
    """
    config = tmp_path / "bumpbot.toml"
    config.write_text(TOML_CONFIG, encoding="utf-8")
    monkeypatch.setenv("BUMPBOT_SANDBOX_DIRECTORY", str(tmp_path / "sandbox"))
    monkeypatch.chdir(tmp_path)
    return config
