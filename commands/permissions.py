"""Permission engine for command file and shell access.

The capability flags on a command are a hard gate: when the flag for an
operation kind is off, the operation is denied and path rules are never
consulted. Within an enabled capability, path rules refine the decision,
with any matching deny rule taking precedence over allow rules.
"""

from __future__ import annotations

import posixpath
from typing import Iterable

from utils import get_logger

from .errors import PermissionDenied
from .globmatch import matches
from .types import CommandSpec, Intent, OperationKind, PathRule, PermissionDecision, RuleEffect

logger = get_logger(__name__)

# Effect applied when a capability is enabled and no path rule matches.
UNMATCHED_PATH_POLICY = RuleEffect.ALLOW

REASON_CAPABILITY_DISABLED = "capability disabled"
REASON_CAPABILITY_ENABLED = "capability enabled"
REASON_NO_RULE_MATCHED = "no rule matched"
REASON_PATH_ESCAPES_ROOT = "path escapes root"


def normalize_path(path: str) -> str | None:
    """Return ``path`` in canonical form, or None if ``..`` climbs above its root."""
    path = path.replace("\\", "/")
    if not path:
        return ""
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if normalized == ".." or normalized.startswith("../"):
        return None
    return "" if normalized == "." else normalized


def _first(rules: Iterable[PathRule], effect: RuleEffect) -> PathRule | None:
    for rule in rules:
        if rule.effect is effect:
            return rule
    return None


def _decide_path(spec: CommandSpec, path: str) -> PermissionDecision:
    target = normalize_path(path)
    if target is None:
        return PermissionDecision(False, None, REASON_PATH_ESCAPES_ROOT)

    matched = [rule for rule in spec.path_rules if matches(rule.pattern, target)]
    deny = _first(matched, RuleEffect.DENY)
    if deny is not None:
        return PermissionDecision(False, deny.pattern, f"denied by rule {deny.pattern}")
    allow = _first(matched, RuleEffect.ALLOW)
    if allow is not None:
        return PermissionDecision(True, allow.pattern, f"allowed by rule {allow.pattern}")
    return PermissionDecision(
        UNMATCHED_PATH_POLICY is RuleEffect.ALLOW, None, REASON_NO_RULE_MATCHED
    )


def authorize(
    spec: CommandSpec, kind: OperationKind, path: str | None = None
) -> PermissionDecision:
    """Decide whether ``spec`` may perform ``kind`` on ``path``.

    Never raises; the decision is always returned.
    """
    if not spec.permissions.allows(kind):
        decision = PermissionDecision(False, None, REASON_CAPABILITY_DISABLED)
    elif path is None:
        decision = PermissionDecision(True, None, REASON_CAPABILITY_ENABLED)
    else:
        decision = _decide_path(spec, path)

    logger.debug(
        f"authorize {spec.name} {kind.value} {path!r}: "
        f"{'allow' if decision.allowed else 'deny'} ({decision.reason})"
    )
    if not decision.allowed:
        logger.info(f"Denied {kind.value} for '{spec.name}' on {path!r}: {decision.reason}")
    return decision


def check(spec: CommandSpec, intents: Iterable[Intent]) -> list[PermissionDecision]:
    """Authorize every intent in order.

    Raises:
        PermissionDenied: On the first intent that is not allowed
    """
    decisions: list[PermissionDecision] = []
    for intent in intents:
        decision = authorize(spec, intent.kind, intent.path)
        if not decision.allowed:
            raise PermissionDenied(decision.reason, kind=intent.kind, path=intent.path)
        decisions.append(decision)
    return decisions
