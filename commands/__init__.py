"""Command registry, routing, permission and template engine for waypoint."""

from .dispatch import Dispatcher
from .errors import (
    CommandError,
    InvalidInvocation,
    InvalidSpec,
    MalformedTemplate,
    MissingArgument,
    PermissionDenied,
    UnknownArgument,
    UnknownCommand,
)
from .globmatch import matches
from .permissions import UNMATCHED_PATH_POLICY, authorize
from .registry import BUILTIN_COMMANDS_DIR, CommandRegistry
from .render import render
from .router import route, suggest
from .types import (
    ArgSpec,
    CommandSpec,
    DispatchRequest,
    DispatchResult,
    Intent,
    OperationKind,
    PathRule,
    PermissionDecision,
    PermissionSet,
    RuleEffect,
)

__all__ = [
    "ArgSpec",
    "BUILTIN_COMMANDS_DIR",
    "CommandError",
    "CommandRegistry",
    "CommandSpec",
    "DispatchRequest",
    "DispatchResult",
    "Dispatcher",
    "Intent",
    "InvalidInvocation",
    "InvalidSpec",
    "MalformedTemplate",
    "MissingArgument",
    "OperationKind",
    "PathRule",
    "PermissionDecision",
    "PermissionDenied",
    "PermissionSet",
    "RuleEffect",
    "UNMATCHED_PATH_POLICY",
    "UnknownArgument",
    "UnknownCommand",
    "authorize",
    "matches",
    "render",
    "route",
    "suggest",
]
