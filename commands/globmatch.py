"""Segment-wise path glob matching.

Patterns and paths are split on ``/``. A ``**`` segment matches zero or more
whole path segments; a bare ``*`` segment matches exactly one non-empty
segment; ``*`` inside a segment (``*.rs``) matches any run of characters
within that segment. Everything else is literal. Matching is anchored at
both ends.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable

RECURSIVE = "**"
WILDCARD = "*"


def split_path(value: str) -> tuple[str, ...]:
    """Split a pattern or path into segments, dropping trailing slashes."""
    value = value.rstrip("/")
    if not value:
        return ()
    return tuple(value.split("/"))


@lru_cache(maxsize=1024)
def _segment_matcher(segment: str) -> Callable[[str], bool]:
    if segment == WILDCARD:
        return bool
    if WILDCARD not in segment:
        return segment.__eq__
    parts = (re.escape(part) for part in segment.split(WILDCARD))
    regex = re.compile("[^/]*".join(parts))
    return lambda value: regex.fullmatch(value) is not None


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> tuple[str, ...]:
    """Normalize a pattern into segments, collapsing runs of ``**``."""
    segments: list[str] = []
    for segment in split_path(pattern):
        if segment == RECURSIVE and segments and segments[-1] == RECURSIVE:
            continue
        segments.append(segment)
    return tuple(segments)


def matches(pattern: str, path: str) -> bool:
    """Return True if ``path`` is matched in full by ``pattern``."""
    pat = compile_pattern(pattern)
    segs = split_path(path)
    memo: dict[tuple[int, int], bool] = {}

    def _match(pi: int, si: int) -> bool:
        key = (pi, si)
        if key in memo:
            return memo[key]

        if pi == len(pat):
            result = si == len(segs)
        elif pat[pi] == RECURSIVE:
            # Try consuming 0..N segments.
            result = any(_match(pi + 1, k) for k in range(si, len(segs) + 1))
        elif si == len(segs):
            result = False
        else:
            result = _segment_matcher(pat[pi])(segs[si]) and _match(pi + 1, si + 1)

        memo[key] = result
        return result

    return _match(0, 0)


def validate_pattern(pattern: object) -> str | None:
    """Return a reason the pattern is malformed, or None if it is usable."""
    if not isinstance(pattern, str):
        return "pattern must be a string"
    if not pattern.strip():
        return "pattern cannot be empty"
    segments = pattern.rstrip("/").split("/")
    # A leading empty segment is an absolute path; interior ones are not allowed.
    if any(segment == "" for segment in segments[1:]):
        return f"pattern '{pattern}' contains an empty segment"
    return None
