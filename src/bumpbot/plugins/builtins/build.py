"""Built-in build commands and the push event.

Chat commands::

    build PROJECT [GIT_REF]   - start the project's pipeline
    info PROJECT              - show the project's configuration

The ``push`` event is what a repository webhook runs: it triggers the
project's pipeline at the pushed ref and reports to the inform channel.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pluggy

from bumpbot.domain.errors import ErrorAlreadyReported

if TYPE_CHECKING:
    from bumpbot.config.models import ProjectConfig
    from bumpbot.handlers.context import InvocationContext
    from bumpbot.services.dispatch import CommandRouter

hookimpl = pluggy.HookimplMarker("bumpbot")


def pipeline_for(project_name: str, project: ProjectConfig) -> str:
    return project.pipeline or project_name


def start_build(ctx: InvocationContext, git_ref: str) -> None:
    """Trigger the current project's pipeline at *git_ref*.

    Raises:
        ErrorAlreadyReported: If the trigger failed (it reported the error itself).
    """
    assert ctx.project_name is not None and ctx.project is not None
    pipeline = pipeline_for(ctx.project_name, ctx.project)
    if not ctx.trigger_build(pipeline, git_ref):
        raise ErrorAlreadyReported(f"Build of {pipeline} at {git_ref} was not started.")
    ctx.info(f"Kicked off a build for {pipeline} at {git_ref}.")


def build_command(ctx: InvocationContext, args: Sequence[str]) -> None:
    assert ctx.project is not None
    git_ref = args[0] if args else ctx.project.default_ref
    start_build(ctx, git_ref)


def info_command(ctx: InvocationContext, args: Sequence[str]) -> None:
    assert ctx.project_name is not None and ctx.project is not None
    lines = [f"Project {ctx.project_name}:"]
    lines.append(f"  pipeline: {pipeline_for(ctx.project_name, ctx.project)}")
    for key, value in sorted(ctx.project.model_dump(exclude={"pipeline"}).items()):
        if value is not None:
            lines.append(f"  {key}: {value}")
    ctx.info("\n".join(lines))


def push_event(ctx: InvocationContext, project_name: str, git_ref: str) -> None:
    """Body of the ``push`` event for *project_name* at *git_ref*."""
    ctx.project_name = project_name
    if ctx.project is None:
        valid = ", ".join(ctx.projects)
        ctx.raise_error(
            f"Push for unknown project {project_name}. Valid projects: {valid}.", status="404"
        )
    start_build(ctx, git_ref)


class BuildCommandsPlugin:
    """Registers the built-in ``build`` and ``info`` commands."""

    @hookimpl
    def register_commands(self, router: CommandRouter) -> None:
        router.register(
            "build",
            {
                "": "Build the project's default ref.",
                "GIT_REF": "Build the given branch, tag or SHA.",
            },
            build_command,
            max_args=1,
        )
        router.register("info", "Show the project's configuration.", info_command)
