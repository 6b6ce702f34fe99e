"""Argument binding and resolution for commands."""

from __future__ import annotations

from typing import Mapping, Sequence

from utils import get_logger

from .errors import MissingArgument, UnknownArgument
from .types import CommandSpec

logger = get_logger(__name__)


def bind_arguments(
    spec: CommandSpec,
    positional: Sequence[str] = (),
    named: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Map raw invocation arguments onto the command's declared arguments.

    Positional values fill declared arguments in order, named values override
    them. Extra positional values are ignored.

    Raises:
        UnknownArgument: If a named value is not a declared argument
    """
    bound: dict[str, str] = {}
    for i, value in enumerate(positional):
        if i < len(spec.args):
            bound[spec.args[i].name] = value
        else:
            logger.warning(f"Extra positional argument ignored: '{value}' (position {i})")

    for key, value in (named or {}).items():
        if spec.arg(key) is None:
            raise UnknownArgument(spec.name, key)
        bound[key] = value
    return bound


def resolve_arguments(spec: CommandSpec, bound_args: Mapping[str, str]) -> dict[str, str]:
    """Resolve every declared argument: explicit value, else default, else absent.

    Bound values for names the command does not declare are passed through so
    templates can still reference them.

    Raises:
        MissingArgument: If a required argument has no value
    """
    resolved = dict(bound_args)
    for arg in spec.args:
        if arg.name in resolved:
            continue
        if arg.default is not None:
            resolved[arg.name] = arg.default
        elif arg.required:
            raise MissingArgument(spec.name, arg.name)
    return resolved
