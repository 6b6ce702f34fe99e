"""Template rendering for command prompts.

Supported syntax:

- ``{{name}}`` is replaced by the resolved value of ``name`` verbatim.
- ``{{#if name}}...{{/if}}`` keeps its body only when ``name`` resolves to a
  non-empty value; ``{{else}}`` may split the body into two branches.

Blocks do not nest. Names that resolve to nothing render as an empty string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from .args import resolve_arguments
from .errors import MalformedTemplate
from .types import CommandSpec

_TOKEN_RE = re.compile(
    r"\{\{\s*(?:#if\s+(?P<open>[A-Za-z_][\w-]*)|(?P<close>/if)|(?P<else>else)"
    r"|(?P<name>[A-Za-z_][\w-]*))\s*\}\}"
)


@dataclass
class _Block:
    name: str
    then_parts: list[str] = field(default_factory=list)
    else_parts: list[str] = field(default_factory=list)
    in_else: bool = False

    def append(self, text: str) -> None:
        (self.else_parts if self.in_else else self.then_parts).append(text)

    def render(self, values: Mapping[str, str]) -> str:
        return "".join(self.then_parts if values.get(self.name) else self.else_parts)


def render_template(template: str, values: Mapping[str, str]) -> str:
    """Expand placeholders and conditional blocks in ``template``.

    Raises:
        MalformedTemplate: On nested, unclosed or stray block delimiters
    """
    out: list[str] = []
    block: _Block | None = None
    pos = 0

    def emit(text: str) -> None:
        if block is not None:
            block.append(text)
        else:
            out.append(text)

    for token in _TOKEN_RE.finditer(template):
        emit(template[pos : token.start()])
        pos = token.end()

        if token.group("open"):
            if block is not None:
                raise MalformedTemplate(
                    f"nested {{{{#if {token.group('open')}}}}} inside {{{{#if {block.name}}}}}"
                )
            block = _Block(token.group("open"))
        elif token.group("close"):
            if block is None:
                raise MalformedTemplate("{{/if}} without a matching {{#if}}")
            out.append(block.render(values))
            block = None
        elif token.group("else"):
            if block is None:
                raise MalformedTemplate("{{else}} outside of an {{#if}} block")
            if block.in_else:
                raise MalformedTemplate(f"duplicate {{{{else}}}} in {{{{#if {block.name}}}}}")
            block.in_else = True
        else:
            emit(values.get(token.group("name")) or "")

    if block is not None:
        raise MalformedTemplate(f"unclosed {{{{#if {block.name}}}}} block")
    out.append(template[pos:])
    return "".join(out)


def render(spec: CommandSpec, bound_args: Mapping[str, str]) -> str:
    """Render the command's template with its arguments resolved.

    Raises:
        MissingArgument: If a required argument is unbound and has no default
        MalformedTemplate: If the template's conditional blocks are unbalanced
    """
    return render_template(spec.template, resolve_arguments(spec, bound_args))
