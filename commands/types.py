"""Data models for the command registry and dispatch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class OperationKind(str, Enum):
    """Kind of filesystem/shell operation a command may perform."""

    READ = "read"
    WRITE = "write"
    EXECUTE = "execute"


class RuleEffect(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class ArgSpec:
    name: str
    required: bool = False
    default: str | None = None
    type: str = "string"
    description: str = ""


@dataclass(frozen=True)
class PermissionSet:
    """Coarse capability flags for a command."""

    read_files: bool = False
    write_files: bool = False
    execute_shell: bool = False

    def allows(self, kind: OperationKind) -> bool:
        if kind is OperationKind.READ:
            return self.read_files
        if kind is OperationKind.WRITE:
            return self.write_files
        return self.execute_shell


@dataclass(frozen=True)
class PathRule:
    pattern: str
    effect: RuleEffect


@dataclass(frozen=True)
class CommandSpec:
    """A registered command or agent.

    Attributes:
        name: Unique command name
        description: Human-readable summary (display only)
        category: Display grouping (display only)
        is_agent: Whether the command is backed by an agent
        agent_id: Agent identifier, present iff is_agent
        activation_hints: Keywords used to auto-route free text; empty means never routed
        permissions: Capability flags
        path_rules: Ordered allow/deny refinements within enabled capabilities
        args: Declared arguments, in positional order
        template: Prompt template text
        source: Document the spec was loaded from, if any
    """

    name: str
    description: str
    category: str
    template: str = ""
    is_agent: bool = False
    agent_id: str | None = None
    activation_hints: tuple[str, ...] = ()
    permissions: PermissionSet = field(default_factory=PermissionSet)
    path_rules: tuple[PathRule, ...] = ()
    args: tuple[ArgSpec, ...] = ()
    source: Path | None = None

    def arg(self, name: str) -> ArgSpec | None:
        for arg in self.args:
            if arg.name == name:
                return arg
        return None


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    matched_rule: str | None
    reason: str


@dataclass(frozen=True)
class Intent:
    """A filesystem or shell operation the execution backend will perform."""

    kind: OperationKind
    path: str | None = None


@dataclass(frozen=True)
class DispatchRequest:
    raw_input: str
    bound_args: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchResult:
    spec_name: str
    rendered_text: str
    agent_id: str | None = None
    bound_args: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Invocation:
    """A parsed `/name positional key=value` invocation."""

    name: str
    positional: tuple[str, ...] = ()
    named: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LoadFailure:
    source: str
    error: str


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of the registry at one point in time."""

    specs: tuple[CommandSpec, ...] = ()
    failures: tuple[LoadFailure, ...] = ()
    by_name: Mapping[str, CommandSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {spec.name: spec for spec in self.specs}
        object.__setattr__(self, "by_name", MappingProxyType(index))

    def get(self, name: str) -> CommandSpec | None:
        return self.by_name.get(name)
