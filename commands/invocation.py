"""Parsing of `/name arg key=value` command invocations."""

from __future__ import annotations

import re
import shlex

from .errors import InvalidInvocation
from .types import Invocation

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_ARG_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

COMMAND_PREFIX = "/"


def first_token(raw_input: str) -> str:
    """Return the leading token of the input without a command prefix."""
    parts = raw_input.strip().split(maxsplit=1)
    if not parts:
        return ""
    return parts[0].removeprefix(COMMAND_PREFIX)


def tokenize(text: str) -> list[str]:
    try:
        return shlex.split(text)
    except ValueError as e:
        raise InvalidInvocation(str(e)) from e


def parse_invocation(raw_input: str) -> Invocation:
    """Parse an invocation such as ``/review src/main.rs depth=deep``.

    The leading ``/`` is optional. Tokens of the form ``key=value`` with a
    valid argument name become named arguments; everything else is positional.

    Raises:
        InvalidInvocation: On empty or invalid command names and unclosed quotes
    """
    tokens = tokenize(raw_input.strip().removeprefix(COMMAND_PREFIX))
    if not tokens:
        raise InvalidInvocation("command name cannot be empty")

    name = tokens[0]
    if not _NAME_RE.match(name):
        raise InvalidInvocation(
            f"invalid command name '{name}': must contain only alphanumeric characters, '-', or '_'"
        )

    positional: list[str] = []
    named: dict[str, str] = {}
    for token in tokens[1:]:
        key, sep, value = token.partition("=")
        if sep and _ARG_NAME_RE.match(key.strip()):
            named[key.strip()] = value.strip()
        else:
            positional.append(token)

    return Invocation(name=name, positional=tuple(positional), named=named)
