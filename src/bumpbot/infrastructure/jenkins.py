"""HTTP client for the Jenkins build service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


class JenkinsHTTPError(RuntimeError):
    """Raised when Jenkins is unreachable or answers with an error status."""


@dataclass
class JenkinsClient:
    """Minimal Jenkins REST client backed by HTTPX.

    Authenticates every request with HTTP basic auth using the Jenkins
    username and API token.
    """

    base_url: str
    username: str
    api_token: str
    timeout_seconds: float = 30.0
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("jenkins base_url must not be empty")

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            auth=(self.username, self.api_token),
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    def post(self, path: str, params: dict[str, Any]) -> httpx.Response:
        """POST *params* as a form body to *path*.

        Raises:
            JenkinsHTTPError: On transport failures or a non-2xx status.
        """
        form = {key: _form_value(value) for key, value in params.items()}
        try:
            with self._client() as client:
                response = client.post(path, data=form)
        except httpx.HTTPError as exc:
            raise JenkinsHTTPError(f"POST {path} failed: {exc}") from exc
        if not response.is_success:
            raise JenkinsHTTPError(
                f"jenkins returned {response.status_code} for POST {path}: {response.text}"
            )
        return response

    def build_with_parameters(self, pipeline: str, params: dict[str, Any]) -> httpx.Response:
        """Queue a parameterized build of *pipeline*."""
        return self.post(f"/job/{pipeline}/buildWithParameters", params)


def _form_value(value: Any) -> str:
    # Jenkins boolean parameters expect lowercase literals.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["JenkinsClient", "JenkinsHTTPError"]
