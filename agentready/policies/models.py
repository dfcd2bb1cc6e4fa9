"""Policy records.

Two variants, never mixed:

- DataPolicy comes from literal data (JSON/YAML files, inline dicts, or any
  source loaded in data-only trust). Its rules have no ``add`` field, so no
  check callable can ride along with configuration data.
- CodePolicy comes from an imported Python module and may add criteria and
  extras with real check functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from agentready.criteria.types import Criterion, ExtraDefinition

DEFAULT_PASS_RATE: float = 0.8

CRITERION_OVERRIDE_KEYS: frozenset[str] = frozenset(
    {"title", "pillar", "level", "scope", "impact", "effort"}
)
EXTRA_OVERRIDE_KEYS: frozenset[str] = frozenset({"title"})

def _no_overrides() -> Mapping[str, Mapping[str, Any]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Thresholds:
    """Level-achievement thresholds. None means "not set by this policy"."""

    pass_rate: float | None = None


@dataclass(frozen=True)
class DataPolicyRules:
    """disable/override rules for criteria or extras."""

    disable: tuple[str, ...] = ()
    override: Mapping[str, Mapping[str, Any]] = field(default_factory=_no_overrides)


@dataclass(frozen=True)
class CodePolicyRules:
    """disable/override/add rules; only code-authored policies carry these."""

    disable: tuple[str, ...] = ()
    override: Mapping[str, Mapping[str, Any]] = field(default_factory=_no_overrides)
    add: tuple[Criterion | ExtraDefinition, ...] = ()


@dataclass(frozen=True)
class DataPolicy:
    name: str
    criteria: DataPolicyRules | None = None
    extras: DataPolicyRules | None = None
    thresholds: Thresholds | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        for rules in (self.criteria, self.extras):
            if rules is not None and type(rules) is not DataPolicyRules:
                raise TypeError("DataPolicy rules must be DataPolicyRules")


@dataclass(frozen=True)
class CodePolicy:
    name: str
    criteria: CodePolicyRules | None = None
    extras: CodePolicyRules | None = None
    thresholds: Thresholds | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        for rules in (self.criteria, self.extras):
            if rules is not None and type(rules) is not CodePolicyRules:
                raise TypeError("CodePolicy rules must be CodePolicyRules")
        if self.criteria is not None:
            for entry in self.criteria.add:
                if not isinstance(entry, Criterion):
                    raise TypeError(f"criteria.add entries must be Criterion, got {type(entry).__name__}")
        if self.extras is not None:
            for entry in self.extras.add:
                if not isinstance(entry, ExtraDefinition):
                    raise TypeError(
                        f"extras.add entries must be ExtraDefinition, got {type(entry).__name__}"
                    )


Policy = Union[DataPolicy, CodePolicy]
