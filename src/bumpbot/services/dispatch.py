"""CommandRouter — command registry and the invocation dispatch boundary.

A chat command looks like ``COMMAND PROJECT [ARGS...]``. Commands are
registered once at setup with their usage help and the maximum number of
trailing arguments; after that the registry is only read, so one router
serves any number of concurrent invocations.

Every invocation (command or event) runs inside the dispatch boundary:

1. a fresh :class:`InvocationContext` with a new id,
2. argument validation (commands only),
3. the handler logic,
4. an outcome (:mod:`bumpbot.services.result`) that decides the epilogue:

   - ``Completed``: remove the sandbox.
   - ``Recovered``: the user already has the message; log the sandbox path
     and remove the sandbox.
   - ``Unhandled``: report the error with its traceback, log the sandbox
     path, keep the sandbox for post-mortem inspection.
"""

from __future__ import annotations

import logging
import re
import shlex
import traceback
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bumpbot.domain.errors import InvocationError
from bumpbot.domain.ids import InvocationIdAllocator
from bumpbot.handlers.context import InvocationContext
from bumpbot.infrastructure.sandbox import SandboxManager
from bumpbot.services.build import BuildTrigger
from bumpbot.services.result import Completed, DispatchResult, Recovered, Unhandled

if TYPE_CHECKING:
    from bumpbot.config.settings import BumpbotSettings
    from bumpbot.plugins.manager import PluginManager
    from bumpbot.transport.ports import ChatResponse, ChatRobot, HttpResponse

logger = logging.getLogger(__name__)

CommandHandler = Callable[[InvocationContext, Sequence[str]], Any]
EventBody = Callable[[InvocationContext], Any]


@dataclass(frozen=True)
class CommandDefinition:
    """A registered chat command.

    Attributes:
        name: Command word, e.g. ``"build"``.
        help: Ordered ``(usage, description)`` pairs, usage like
            ``"build PROJECT GIT_REF"``.
        max_args: Trailing arguments allowed after the project token.
        handler: Called as ``handler(context, args)``.
    """

    name: str
    help: tuple[tuple[str, str], ...]
    max_args: int
    handler: CommandHandler

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(rf"^{re.escape(self.name)}\b")

    @property
    def usage(self) -> str:
        text = "Usage: "
        if len(self.help) > 1:
            text += "\n"
        return text + "\n".join(f"{usage}   - {description}" for usage, description in self.help)


def expand_help(name: str, help_entries: str | Mapping[str, str]) -> tuple[tuple[str, str], ...]:
    """Expand help entries into ``("NAME PROJECT ARGPATTERN", description)`` pairs.

    A bare string documents the command with no extra arguments.
    """
    if isinstance(help_entries, str):
        help_entries = {"": help_entries}
    return tuple((f"{name} PROJECT {arg}".strip(), text) for arg, text in help_entries.items())


class CommandRouter:
    """Registry of chat commands plus the dispatch boundary.

    Parameters:
        settings: Bot settings (projects, sandbox root, flags).
        robot: Chat transport used for channel broadcasts.
        allocator: Shared invocation id allocator (one per process).
        sandbox: Sandbox manager; defaults to ``settings.sandbox_directory``.
        builds: Build trigger handed to every context.
        plugins: Plugin manager notified after each invocation.
    """

    def __init__(
        self,
        settings: BumpbotSettings,
        robot: ChatRobot,
        *,
        allocator: InvocationIdAllocator | None = None,
        sandbox: SandboxManager | None = None,
        builds: BuildTrigger | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._robot = robot
        self._allocator = allocator or InvocationIdAllocator()
        self._sandbox = sandbox or SandboxManager(settings.sandbox_directory)
        self._builds = builds or BuildTrigger(settings)
        self._plugins = plugins
        self._commands: dict[str, CommandDefinition] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        help_entries: str | Mapping[str, str],
        handler: CommandHandler,
        *,
        max_args: int = 0,
    ) -> CommandDefinition:
        """Register *handler* as chat command *name*.

        Raises:
            ValueError: If *name* is already registered or *max_args* is negative.
        """
        if name in self._commands:
            raise ValueError(f"Command {name!r} is already registered")
        if max_args < 0:
            raise ValueError(f"max_args must be >= 0, got {max_args}")
        definition = CommandDefinition(
            name=name,
            help=expand_help(name, help_entries),
            max_args=max_args,
            handler=handler,
        )
        self._commands[name] = definition
        logger.debug("Registered command: %s", name)
        return definition

    def command(
        self, name: str, help_entries: str | Mapping[str, str], *, max_args: int = 0
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: CommandHandler) -> CommandHandler:
            self.register(name, help_entries, handler, max_args=max_args)
            return handler

        return decorator

    def load_plugins(self) -> None:
        """Let every registered plugin add its commands."""
        if self._plugins is not None:
            self._plugins.hook.register_commands(router=self)

    @property
    def definitions(self) -> list[CommandDefinition]:
        return list(self._commands.values())

    def match(self, text: str) -> CommandDefinition | None:
        """The command whose pattern matches the start of *text*."""
        for definition in self._commands.values():
            if definition.pattern.match(text):
                return definition
        return None

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        response: ChatResponse,
        *,
        http_response: HttpResponse | None = None,
    ) -> DispatchResult | None:
        """Run the command in *response*. None when no command matches."""
        definition = self.match(response.body)
        if definition is None:
            return None
        ctx = self._new_context(definition.name, response=response, http_response=http_response)
        return self._run(ctx, response.body, lambda: self._invoke(ctx, definition, response.body))

    def handle_event(
        self,
        title: str,
        body: EventBody,
        *,
        http_response: HttpResponse | None = None,
    ) -> DispatchResult:
        """Run *body* as a non-command invocation named *title*.

        Output goes to the project's inform channel (or the default one);
        *body* is expected to set ``context.project_name`` itself.
        """
        ctx = self._new_context(title, http_response=http_response)

        def run() -> None:
            ctx.debug(f"Handling event {title}")
            body(ctx)

        return self._run(ctx, title, run)

    def _new_context(
        self,
        handler_name: str,
        *,
        response: ChatResponse | None = None,
        http_response: HttpResponse | None = None,
    ) -> InvocationContext:
        return InvocationContext(
            self._allocator.next_id(),
            settings=self._settings,
            robot=self._robot,
            sandbox=self._sandbox,
            builds=self._builds,
            handler_name=handler_name,
            response=response,
            http_response=http_response,
        )

    def _invoke(self, ctx: InvocationContext, definition: CommandDefinition, text: str) -> None:
        args = self._validate(ctx, definition, text)
        definition.handler(ctx, args)

    @staticmethod
    def _validate(ctx: InvocationContext, definition: CommandDefinition, text: str) -> list[str]:
        """Check the project token and argument count; return the trailing args."""
        tokens = split_arguments(text)[1:]
        if not tokens:
            ctx.raise_error(f"No project specified!\n{definition.usage}")
        ctx.project_name = tokens[0]
        ctx.debug(f"Handling command {definition.name!r}")
        if ctx.project is None:
            valid = ", ".join(ctx.projects)
            ctx.raise_error(f"Invalid project. Valid projects: {valid}.\n{definition.usage}")
        args = tokens[1:]
        if len(args) > definition.max_args:
            ctx.raise_error(
                f"Too many arguments ({len(args) + 1} for {definition.max_args + 1})!\n"
                f"{definition.usage}"
            )
        return args

    def _run(
        self, ctx: InvocationContext, input_text: str, body: Callable[[], Any]
    ) -> DispatchResult:
        def body_then_cleanup() -> None:
            body()
            # A failed cleanup ends the invocation as Unhandled.
            ctx.cleanup()

        result = self._capture(ctx, input_text, body_then_cleanup)
        self._finish(ctx, result)
        self._notify(result)
        return result

    @staticmethod
    def _capture(
        ctx: InvocationContext, input_text: str, body: Callable[[], Any]
    ) -> DispatchResult:
        """Run *body* and turn its ending into a DispatchResult."""
        try:
            body()
        except Exception as exc:
            fields = _outcome_fields(ctx)
            if isinstance(exc, InvocationError) and exc.already_reported:
                return Recovered(**fields, message=exc.message)
            trace = "".join(traceback.format_exception(exc)).rstrip()
            report = f'Unhandled error while working on "{input_text}":\n```{exc}\n{trace}```.'
            return Unhandled(**fields, error=exc, report=report)
        return Completed(**_outcome_fields(ctx))

    @staticmethod
    def _finish(ctx: InvocationContext, result: DispatchResult) -> None:
        """Epilogue for failed invocations; Completed ones cleaned up in the body."""
        if isinstance(result, Unhandled):
            ctx.error(result.report)
            # Sandbox is kept (and created if never used) for inspection.
            try:
                sandbox = ctx.sandbox_directory
            except OSError:
                logger.warning(
                    "Could not create sandbox for invocation %s", ctx.handler_id, exc_info=True
                )
                sandbox = result.sandbox_directory
            ctx.debug(f"Sandbox: {sandbox}")
        elif isinstance(result, Recovered):
            ctx.debug(f"Sandbox: {result.sandbox_directory}")
            try:
                ctx.cleanup()
            except OSError:
                logger.warning(
                    "Could not remove sandbox %s", result.sandbox_directory, exc_info=True
                )

    def _notify(self, result: DispatchResult) -> None:
        """Dispatch ``post_dispatch``. INVARIANT: plugin failures are warnings, never errors."""
        if self._plugins is None:
            return
        try:
            self._plugins.hook.post_dispatch(outcome=result)
        except Exception:
            logger.warning(
                "post_dispatch hook failed for invocation %s", result.handler_id, exc_info=True
            )


def split_arguments(text: str) -> list[str]:
    """Shell-style tokens of *text*; plain whitespace split if its quoting is unbalanced."""
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


def _outcome_fields(ctx: InvocationContext) -> dict[str, Any]:
    return {
        "handler_id": ctx.handler_id,
        "handler_name": ctx.handler_name,
        "project_name": ctx.project_name,
        "sandbox_directory": ctx.sandbox_path,
    }
