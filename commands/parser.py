"""Parsing helpers for command definition documents.

A command document is Markdown with a YAML frontmatter block::

    ---
    name: review
    description: Review code for correctness
    category: analysis
    agent: true
    agent_id: code-reviewer
    activation_hints: [review, code review]
    permissions:
      read_files: true
      path_rules:
        - deny: "**/secrets/**"
    args:
      - name: target
        type: file
        required: true
    ---

    ## Template
    Review {{target}}.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import yaml

from .errors import InvalidSpec
from .globmatch import validate_pattern
from .types import ArgSpec, CommandSpec, PathRule, PermissionSet, RuleEffect

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_ARG_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")

ARG_TYPES = ("string", "number", "boolean", "file")
PERMISSION_FLAGS = ("read_files", "write_files", "execute_shell")
TEMPLATE_HEADING = "template"


def split_frontmatter(text: str, source: str = "<string>") -> tuple[dict[str, Any], str]:
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        raise InvalidSpec(source, "missing frontmatter delimiter")

    end_idx = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end_idx = i
            break

    if end_idx is None:
        raise InvalidSpec(source, "no closing frontmatter delimiter")

    yaml_text = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    try:
        data = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError as e:
        raise InvalidSpec(source, f"failed to parse YAML frontmatter: {e}") from e

    if not isinstance(data, dict):
        raise InvalidSpec(source, "frontmatter must be a mapping")

    return data, body


def extract_template(body: str) -> str:
    """Return the template section of a document body.

    If the body has a heading named ``Template``, only the text under it (up to
    the next heading of the same or higher level) is the template. Otherwise
    the whole body is.
    """
    lines = body.splitlines()
    start = None
    level = 0
    for i, line in enumerate(lines):
        heading = _HEADING_RE.match(line)
        if heading and heading.group(2).strip().lower() == TEMPLATE_HEADING:
            start = i + 1
            level = len(heading.group(1))
            break

    if start is None:
        return body.strip()

    end = len(lines)
    for i in range(start, len(lines)):
        heading = _HEADING_RE.match(lines[i])
        if heading and len(heading.group(1)) <= level:
            end = i
            break
    return "\n".join(lines[start:end]).strip()


def _require_str(data: dict[str, Any], key: str, source: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidSpec(source, f"missing required field '{key}'")
    return value.strip()


def _require_bool(value: Any, key: str, source: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidSpec(source, f"field '{key}' must be a boolean")
    return value


def _parse_args(raw: Any, source: str) -> tuple[ArgSpec, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise InvalidSpec(source, "'args' must be a list")

    args: list[ArgSpec] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict):
            raise InvalidSpec(source, "argument entries must be mappings")
        name = entry.get("name")
        if not isinstance(name, str) or not _ARG_NAME_RE.match(name):
            raise InvalidSpec(source, f"invalid argument name: {name!r}")
        if name in seen:
            raise InvalidSpec(source, f"duplicate argument '{name}'")
        seen.add(name)

        arg_type = entry.get("type", "string")
        if arg_type not in ARG_TYPES:
            raise InvalidSpec(source, f"argument '{name}' has unknown type {arg_type!r}")

        required = _require_bool(entry.get("required"), f"args.{name}.required", source)
        default = entry.get("default")
        if default is not None:
            if isinstance(default, (dict, list)):
                raise InvalidSpec(source, f"argument '{name}' default must be a scalar")
            default = str(default).lower() if isinstance(default, bool) else str(default)
        if required and default is not None:
            raise InvalidSpec(
                source, f"argument '{name}' cannot be both required and have a default value"
            )

        description = entry.get("description") or ""
        args.append(
            ArgSpec(
                name=name,
                required=required,
                default=default,
                type=arg_type,
                description=str(description),
            )
        )
    return tuple(args)


def _parse_path_rules(raw: Any, source: str) -> tuple[PathRule, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise InvalidSpec(source, "'permissions.path_rules' must be a list")

    rules: list[PathRule] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise InvalidSpec(source, "path rule entries must be mappings")
        if "pattern" in entry:
            pattern = entry.get("pattern")
            effect = entry.get("effect")
        elif len(entry) == 1:
            # Shorthand form: {allow: pattern} / {deny: pattern}
            effect, pattern = next(iter(entry.items()))
        else:
            raise InvalidSpec(source, f"unrecognized path rule: {entry!r}")

        try:
            effect = RuleEffect(str(effect).lower())
        except ValueError:
            raise InvalidSpec(
                source, f"path rule effect must be allow or deny, got {effect!r}"
            ) from None

        problem = validate_pattern(pattern)
        if problem:
            raise InvalidSpec(source, problem)
        rules.append(PathRule(pattern=pattern, effect=effect))
    return tuple(rules)


def _parse_permissions(raw: Any, source: str) -> tuple[PermissionSet, tuple[PathRule, ...]]:
    if raw is None:
        return PermissionSet(), ()
    if not isinstance(raw, dict):
        raise InvalidSpec(source, "'permissions' must be a mapping")
    flags = {
        flag: _require_bool(raw.get(flag), f"permissions.{flag}", source)
        for flag in PERMISSION_FLAGS
    }
    return PermissionSet(**flags), _parse_path_rules(raw.get("path_rules"), source)


def _parse_hints(raw: Any, source: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(h, str) for h in raw):
        raise InvalidSpec(source, "'activation_hints' must be a list of strings")
    return tuple(h.strip() for h in raw if h.strip())


def parse_command(text: str, source: str = "<string>", path: Path | None = None) -> CommandSpec:
    """Parse one command document into a CommandSpec.

    Raises:
        InvalidSpec: If the document fails structural validation
    """
    data, body = split_frontmatter(text, source)

    name = _require_str(data, "name", source)
    if not _NAME_RE.match(name):
        raise InvalidSpec(
            source,
            f"command name '{name}' contains invalid characters "
            "(only alphanumeric, '-', '_' allowed)",
        )
    description = _require_str(data, "description", source)
    category = _require_str(data, "category", source)

    is_agent = _require_bool(data.get("agent"), "agent", source)
    agent_id = data.get("agent_id")
    if agent_id is not None and (not isinstance(agent_id, str) or not agent_id.strip()):
        raise InvalidSpec(source, "'agent_id' must be a non-empty string")
    if is_agent and agent_id is None:
        raise InvalidSpec(source, "'agent_id' is required when agent is true")
    if not is_agent and agent_id is not None:
        raise InvalidSpec(source, "'agent_id' is only allowed when agent is true")

    permissions, path_rules = _parse_permissions(data.get("permissions"), source)

    return CommandSpec(
        name=name,
        description=description,
        category=category,
        template=extract_template(body),
        is_agent=is_agent,
        agent_id=agent_id.strip() if agent_id else None,
        activation_hints=_parse_hints(data.get("activation_hints"), source),
        permissions=permissions,
        path_rules=path_rules,
        args=_parse_args(data.get("args"), source),
        source=path,
    )


async def read_text(path: Path) -> str:
    async with aiofiles.open(path, encoding="utf-8") as handle:
        return await handle.read()


async def list_command_files(commands_dir: Path) -> list[Path]:
    if not await aiofiles.os.path.exists(commands_dir):
        return []

    def _collect() -> list[Path]:
        return sorted(p for p in commands_dir.glob("*.md") if p.is_file())

    return await asyncio.to_thread(_collect)
