"""Policy chain resolution.

resolve_chain() folds an ordered list of policies over the base registry.
Per policy the order is fixed: disable, then override, then add, then
thresholds, then the name is appended to the chain. Later policies win on
every field they touch, and ``add`` works on the current list, so it can
bring back a criterion an earlier policy disabled.

Inputs are never mutated: overrides produce new records via
dataclasses.replace and the base sequences are copied up front.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, TypeVar

from agentready.criteria.types import Criterion, ExtraDefinition
from agentready.policies.models import DEFAULT_PASS_RATE, Policy

logger = logging.getLogger(__name__)

T = TypeVar("T", Criterion, ExtraDefinition)

# Overrides never touch these, even if a caller bypasses validation.
_PROTECTED_FIELDS: frozenset[str] = frozenset({"id", "check", "scope"})


@dataclass(frozen=True)
class ResolvedThresholds:
    pass_rate: float = DEFAULT_PASS_RATE


@dataclass(frozen=True)
class ResolvedChain:
    """Fold output: applied policy names plus the final configuration."""

    chain: tuple[str, ...]
    criteria: tuple[Criterion, ...]
    extras: tuple[ExtraDefinition, ...]
    thresholds: ResolvedThresholds


def _apply_disable(items: list[T], disable: Sequence[str]) -> list[T]:
    if not disable:
        return items
    drop = set(disable)
    return [item for item in items if item.id not in drop]


def _apply_override(
    items: list[T], override: Mapping[str, Mapping[str, Any]], policy_name: str
) -> list[T]:
    if not override:
        return items
    index = {item.id: i for i, item in enumerate(items)}
    out = list(items)
    for item_id, fields in override.items():
        pos = index.get(item_id)
        if pos is None:
            logger.debug("Policy %r overrides unknown id %r; ignored", policy_name, item_id)
            continue
        current = out[pos]
        changes = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS}
        scope = fields.get("scope")
        if scope is not None and scope != getattr(current, "scope", scope):
            logger.warning(
                "Policy %r tried to change scope of %r from %r to %r; scope is fixed",
                policy_name,
                item_id,
                current.scope,
                scope,
            )
        if changes:
            out[pos] = dataclasses.replace(current, **changes)
    return out


def _apply_add(items: list[T], add: Sequence[T]) -> list[T]:
    if not add:
        return items
    out = list(items)
    for entry in add:
        for i, existing in enumerate(out):
            if existing.id == entry.id:
                out[i] = entry
                break
        else:
            out.append(entry)
    return out


def _apply_rules(items: list[T], rules: Any, policy_name: str) -> list[T]:
    if rules is None:
        return items
    items = _apply_disable(items, rules.disable)
    items = _apply_override(items, rules.override, policy_name)
    # DataPolicyRules has no add field
    return _apply_add(items, getattr(rules, "add", ()))


def resolve_chain(
    base_criteria: Sequence[Criterion],
    base_extras: Sequence[ExtraDefinition],
    policies: Sequence[Policy] | None,
) -> ResolvedChain:
    """Fold policies over the base criteria and extras.

    Args:
        base_criteria: Registry criteria, in report order.
        base_extras: Registry extras, in report order.
        policies: Policies in application order (earliest first).

    Returns:
        ResolvedChain with the applied policy names, final criteria and
        extras, and thresholds (pass_rate defaults to 0.8).
    """
    criteria = list(base_criteria)
    extras = list(base_extras)
    pass_rate = DEFAULT_PASS_RATE
    chain: list[str] = []

    for policy in policies or ():
        criteria = _apply_rules(criteria, policy.criteria, policy.name)
        extras = _apply_rules(extras, policy.extras, policy.name)
        if policy.thresholds is not None and policy.thresholds.pass_rate is not None:
            pass_rate = policy.thresholds.pass_rate
        chain.append(policy.name)

    if chain:
        logger.info(
            "Resolved policy chain %s: %d criteria, %d extras, passRate=%s",
            " -> ".join(chain),
            len(criteria),
            len(extras),
            pass_rate,
        )
    return ResolvedChain(
        chain=tuple(chain),
        criteria=tuple(criteria),
        extras=tuple(extras),
        thresholds=ResolvedThresholds(pass_rate=pass_rate),
    )
