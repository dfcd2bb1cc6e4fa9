"""Criterion data model and built-in registry."""

from __future__ import annotations

from agentready.criteria.registry import Registry, build_registry
from agentready.criteria.types import (
    AreaCriterion,
    CheckFn,
    CheckOutcome,
    Criterion,
    ExtraDefinition,
    passed_if,
)

__all__ = [
    "AreaCriterion",
    "CheckFn",
    "CheckOutcome",
    "Criterion",
    "ExtraDefinition",
    "Registry",
    "build_registry",
    "passed_if",
]
