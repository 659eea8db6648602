"""BuildTrigger — start Jenkins builds on behalf of an invocation.

With ``trigger_real_builds`` off (the default) the trigger is simulated:
a warning is reported and no request is sent. A failed request is
reported to the user and returned as False; the caller decides whether
that ends the invocation. There is no retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bumpbot.infrastructure.jenkins import JenkinsClient, JenkinsHTTPError

if TYPE_CHECKING:
    import httpx

    from bumpbot.config.settings import BumpbotSettings
    from bumpbot.handlers.context import InvocationContext

DEFAULT_INITIATOR = "BumpBot"


@dataclass(frozen=True)
class BuildTriggerRequest:
    """Parameters of one ``buildWithParameters`` call."""

    pipeline: str
    git_ref: str
    initiator: str

    def parameters(self) -> dict[str, Any]:
        return {
            "GIT_REF": self.git_ref,
            "EXPIRE_CACHE": False,
            "INITIATED_BY": self.initiator,
        }


class BuildTrigger:
    """Issue build requests to Jenkins.

    Parameters:
        settings: Supplies the real-builds flag and Jenkins credentials.
        transport: Optional HTTPX transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: BumpbotSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def client(self) -> JenkinsClient:
        jenkins = self._settings.jenkins
        return JenkinsClient(
            base_url=jenkins.endpoint,
            username=jenkins.username,
            api_token=jenkins.api_token,
            timeout_seconds=jenkins.timeout_seconds,
            transport=self._transport,
        )

    def trigger_build(self, ctx: InvocationContext, pipeline: str, git_ref: str) -> bool:
        """Trigger *pipeline* at *git_ref*. Returns whether the build was started."""
        ctx.debug(f"Kicking off a build for {pipeline} at ref {git_ref}.")

        if not self._settings.trigger_real_builds:
            ctx.warn("Would have triggered a build, but trigger_real_builds is false.")
            return True

        initiator = ctx.response.user_name if ctx.response is not None else DEFAULT_INITIATOR
        request = BuildTriggerRequest(pipeline=pipeline, git_ref=git_ref, initiator=initiator)
        try:
            self.client().build_with_parameters(request.pipeline, request.parameters())
        except JenkinsHTTPError as exc:
            ctx.error(f"Sorry, received HTTP error when kicking off the build!\n{exc}")
            return False
        return True
