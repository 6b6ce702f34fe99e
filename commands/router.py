"""Activation routing of free-text input to commands.

Each hint that occurs (case-insensitively) in the input adds its character
length to the command's score, so longer and more specific hints weigh more.
Ties are broken by the longest single matching hint, then by registration
order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .types import CommandSpec


@dataclass(frozen=True)
class RouteScore:
    spec: CommandSpec
    total: int
    longest: int
    order: int


def score(spec: CommandSpec, text: str, order: int = 0) -> RouteScore:
    haystack = text.lower()
    total = 0
    longest = 0
    for hint in spec.activation_hints:
        if hint and hint.lower() in haystack:
            total += len(hint)
            longest = max(longest, len(hint))
    return RouteScore(spec=spec, total=total, longest=longest, order=order)


def _rank_key(entry: RouteScore) -> tuple[int, int, int]:
    return (-entry.total, -entry.longest, entry.order)


def suggest(text: str, specs: Iterable[CommandSpec], limit: int | None = None) -> list[RouteScore]:
    """Rank every candidate command for ``text``, best first.

    Commands without activation hints and commands scoring 0 are not candidates.
    """
    ranked = [
        entry
        for entry in (score(spec, text, order) for order, spec in enumerate(specs))
        if entry.spec.activation_hints and entry.total > 0
    ]
    ranked.sort(key=_rank_key)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def route(text: str, specs: Sequence[CommandSpec]) -> CommandSpec | None:
    """Return the best-scoring command for ``text``, or None if nothing matches."""
    best = suggest(text, specs, limit=1)
    return best[0].spec if best else None
