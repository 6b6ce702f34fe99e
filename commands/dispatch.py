"""Dispatch coordinator: resolve, bind, authorize and render one invocation."""

from __future__ import annotations

from typing import Iterable

from utils import get_logger

from .args import bind_arguments, resolve_arguments
from .errors import UnknownCommand
from .invocation import COMMAND_PREFIX, first_token, parse_invocation
from .permissions import check
from .registry import CommandRegistry
from .render import render_template
from .router import route
from .types import CatalogSnapshot, CommandSpec, DispatchRequest, DispatchResult, Intent

logger = get_logger(__name__)


class Dispatcher:
    """Turn a DispatchRequest into a DispatchResult for the execution backend.

    The steps run in a fixed order and each can abort the dispatch:

    1. Exact-name lookup on the first token, then activation routing
       (UnknownCommand if neither resolves).
    2. Argument binding (MissingArgument). Only ``/name ...`` invocations bind
       trailing tokens (InvalidInvocation, UnknownArgument); prose binds the
       request's explicit arguments alone.
    3. Authorization of the backend's declared intents (PermissionDenied).
    4. Template rendering (MalformedTemplate).

    No step has side effects, so a failed dispatch leaves nothing behind.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry

    def resolve(
        self, raw_input: str, snapshot: CatalogSnapshot | None = None
    ) -> tuple[CommandSpec, bool]:
        """Resolve the command for ``raw_input``.

        Returns:
            The spec and whether it was found by exact name (False when routed)

        Raises:
            UnknownCommand: If nothing resolves
        """
        snapshot = snapshot or self.registry.snapshot
        token = first_token(raw_input)
        spec = snapshot.get(token)
        if spec is not None:
            return spec, True

        spec = route(raw_input, snapshot.specs)
        if spec is None:
            raise UnknownCommand(token or raw_input)
        logger.info(f"Routed input to '{spec.name}'")
        return spec, False

    def dispatch(
        self, request: DispatchRequest, intents: Iterable[Intent] = ()
    ) -> DispatchResult:
        snapshot = self.registry.snapshot
        spec, by_name = self.resolve(request.raw_input, snapshot)

        if by_name and request.raw_input.lstrip().startswith(COMMAND_PREFIX):
            invocation = parse_invocation(request.raw_input)
            bound = bind_arguments(spec, invocation.positional, invocation.named)
        else:
            # Prose input binds only the caller's explicit arguments.
            bound = {}
        bound.update(request.bound_args)

        resolved = resolve_arguments(spec, bound)
        check(spec, intents)
        rendered = render_template(spec.template, resolved)

        logger.info(f"Dispatched '{spec.name}' ({len(rendered)} chars)")
        return DispatchResult(
            spec_name=spec.name,
            rendered_text=rendered,
            agent_id=spec.agent_id,
            bound_args=resolved,
        )
