"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, bumpbot.toml only contains overrides.
A working bot needs only [jenkins] credentials and one [projects.NAME] table.
"""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_JENKINS_ENDPOINT = "http://manhattan.ci.chef.co/"


class JenkinsConfig(BaseModel):
    """[jenkins] section."""

    model_config = {"frozen": True}

    username: str = ""
    api_token: str = ""
    endpoint: str = DEFAULT_JENKINS_ENDPOINT
    timeout_seconds: float = 30.0


class ProjectConfig(BaseModel):
    """[projects.NAME] section.

    Unknown keys are kept so plugins can carry their own per-project
    settings alongside the ones the engine reads.
    """

    model_config = {"frozen": True, "extra": "allow"}

    inform_channel: str | None = None
    pipeline: str | None = None
    default_ref: str = "main"
    github_url: str | None = None
