"""Criterion and extra-check records.

Criteria are plain immutable data plus one capability, ``check``. Everything
except ``check`` is metadata a policy may override; ``id`` and ``check`` are
fixed at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Protocol, Union

if TYPE_CHECKING:
    from agentready.context import ReadinessContext, RepoApp, RepoArea

Status = Literal["pass", "fail", "skip"]
Scope = Literal["repo", "app"]
Impact = Literal["high", "medium", "low"]
Effort = Literal["low", "medium", "high"]

STATUSES: frozenset[str] = frozenset({"pass", "fail", "skip"})
SCOPES: frozenset[str] = frozenset({"repo", "app"})
IMPACTS: frozenset[str] = frozenset({"high", "medium", "low"})
EFFORTS: frozenset[str] = frozenset({"low", "medium", "high"})
MIN_LEVEL: int = 1
MAX_LEVEL: int = 5


@dataclass(frozen=True)
class CheckOutcome:
    """What a single check invocation found."""

    status: Status
    reason: str | None = None
    evidence: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.status not in STATUSES:
            raise ValueError(f"check status must be one of {sorted(STATUSES)}, got {self.status!r}")


def passed_if(condition: bool, reason: str, evidence: tuple[str, ...] = ()) -> CheckOutcome:
    """Return a pass outcome when condition holds, else fail with reason."""
    if condition:
        return CheckOutcome(status="pass", evidence=evidence)
    return CheckOutcome(status="fail", reason=reason, evidence=evidence)


class CheckFn(Protocol):
    """Capability: inspect a read-only context (and optionally one unit)."""

    def __call__(
        self,
        context: ReadinessContext,
        app: Union[RepoApp, RepoArea, None] = None,
    ) -> CheckOutcome: ...


@dataclass(frozen=True)
class Criterion:
    """A named, independently checkable readiness indicator."""

    id: str
    title: str
    pillar: str
    level: int
    scope: Scope
    impact: Impact
    effort: Effort
    check: CheckFn = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id or not isinstance(self.id, str):
            raise ValueError("criterion id must be a non-empty string")
        if not isinstance(self.level, int) or isinstance(self.level, bool):
            raise ValueError(f"criterion {self.id!r} level must be an integer")
        if not MIN_LEVEL <= self.level <= MAX_LEVEL:
            raise ValueError(
                f"criterion {self.id!r} level must be between {MIN_LEVEL} and {MAX_LEVEL}, "
                f"got {self.level}"
            )
        if self.scope not in SCOPES:
            raise ValueError(f"criterion {self.id!r} scope must be 'repo' or 'app', got {self.scope!r}")
        if self.impact not in IMPACTS:
            raise ValueError(f"criterion {self.id!r} impact must be one of {sorted(IMPACTS)}, got {self.impact!r}")
        if self.effort not in EFFORTS:
            raise ValueError(f"criterion {self.id!r} effort must be one of {sorted(EFFORTS)}, got {self.effort!r}")
        if not callable(self.check):
            raise ValueError(f"criterion {self.id!r} check must be callable")


@dataclass(frozen=True)
class AreaCriterion:
    """A criterion evaluated once per configured repository area.

    Area criteria feed the per-area breakdown only; they are not part of the
    policy fold or of the repository-wide level aggregation.
    """

    id: str
    title: str
    pillar: str
    level: int
    impact: Impact
    effort: Effort
    check: CheckFn = field(compare=False, repr=False)


@dataclass(frozen=True)
class ExtraDefinition:
    """A flat pass/fail check outside the pillar/level model."""

    id: str
    title: str
    check: CheckFn = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id or not isinstance(self.id, str):
            raise ValueError("extra id must be a non-empty string")
        if not callable(self.check):
            raise ValueError(f"extra {self.id!r} check must be callable")
