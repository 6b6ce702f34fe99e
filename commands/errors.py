"""Errors raised while loading and dispatching commands."""

from __future__ import annotations

from .types import OperationKind


class CommandError(Exception):
    """Base class for all command errors."""

    pass


class UnknownCommand(CommandError):
    """Raised when no command resolves by name or by routing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command: '{name}'")


class MissingArgument(CommandError):
    """Raised when a required argument has no binding and no default."""

    def __init__(self, command: str, argument: str):
        self.command = command
        self.argument = argument
        super().__init__(f"Required argument '{argument}' missing for command '{command}'")


class UnknownArgument(CommandError):
    """Raised when a named argument is not declared by the command."""

    def __init__(self, command: str, argument: str):
        self.command = command
        self.argument = argument
        super().__init__(f"Unknown argument '{argument}' for command '{command}'")


class MalformedTemplate(CommandError):
    """Raised when a template has unbalanced or nested conditional blocks."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed template: {reason}")


class PermissionDenied(CommandError):
    """Raised when a declared intent is not authorized for the command."""

    def __init__(self, reason: str, kind: OperationKind | None = None, path: str | None = None):
        self.reason = reason
        self.kind = kind
        self.path = path
        target = f" on '{path}'" if path else ""
        action = f"{kind.value}{target}: " if kind else ""
        super().__init__(f"Permission denied: {action}{reason}")


class InvalidSpec(CommandError):
    """Raised when a command document fails structural validation."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid command definition {source}: {reason}")


class InvalidInvocation(CommandError):
    """Raised when a slash invocation cannot be tokenized."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid invocation: {reason}")
