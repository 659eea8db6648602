"""Bot settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``BUMPBOT_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``bumpbot.toml`` discovered via walk-up
  4. Code defaults

The engine only reads settings; loading and validating them is the job of
this module alone.
"""

from __future__ import annotations

import tempfile
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bumpbot.config.discovery import find_config
from bumpbot.config.models import JenkinsConfig, ProjectConfig

_TMP_ROOT = Path(tempfile.gettempdir()) / "bumpbot"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``bumpbot.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class BumpbotSettings(BaseSettings):
    """Unified, frozen settings for the bot.

    Attributes:
        trigger_real_builds: When False, build triggers are only simulated.
        default_inform_channel: Channel used when a project names none.
        sandbox_directory: Root under which per-invocation sandboxes live.
        debug_lines_in_pm: Echo debug lines back to private-message senders.
        command_timeout: Seconds before a shelled-out command is killed.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BUMPBOT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False

    # --- Bot behaviour ---
    polling_interval: int | None = None
    trigger_real_builds: bool = False
    default_inform_channel: str = "chef-notify"
    cache_directory: Path = _TMP_ROOT
    sandbox_directory: Path = _TMP_ROOT / "sandbox"
    debug_lines_in_pm: bool = True
    command_timeout: float = 3600

    # --- TOML sections ---
    jenkins: JenkinsConfig = Field(default_factory=JenkinsConfig)
    projects: dict[str, ProjectConfig] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> BumpbotSettings:
        """Construct settings from a CLI invocation.

        Uses the explicit *config_path* when given, otherwise discovers
        ``bumpbot.toml`` by walking up from *start*.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
