"""Evaluation runner: execute resolved criteria and extras against a context.

Every check goes through run_check_isolated(), which returns either a
CheckOutcome or a CheckError. A check that raises (or returns the wrong type)
fails its own criterion with the error as reason; sibling checks still run.

All (criterion, unit) invocations are independent. With max_workers > 1 they
fan out over a thread pool; results are regrouped in registry order before
anything is aggregated.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, TypeVar, Union

from agentready.context import ReadinessContext, RepoApp, RepoArea
from agentready.criteria.types import AreaCriterion, CheckFn, CheckOutcome, Criterion, ExtraDefinition
from agentready.schemas.readiness import AppSummary, CriterionResult, ExtraResult
from agentready.services.readiness.scoring_constants import (
    APP_PASS_RATE,
    NO_APPS_REASON,
    app_failure_reason,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class CheckError:
    """A check invocation that raised instead of returning an outcome."""

    check_id: str
    error_type: str
    message: str

    def to_outcome(self) -> CheckOutcome:
        detail = f"{self.error_type}: {self.message}" if self.message else self.error_type
        return CheckOutcome(status="fail", reason=f"Check raised {detail}")


CheckResult = Union[CheckOutcome, CheckError]


def run_check_isolated(
    check_id: str,
    check: CheckFn,
    context: ReadinessContext,
    unit: RepoApp | RepoArea | None = None,
) -> CheckResult:
    """Invoke one check, capturing any exception as a CheckError."""
    try:
        outcome = check(context) if unit is None else check(context, unit)
    except Exception as exc:
        logger.exception("Check %s raised for %s", check_id, _unit_label(unit))
        return CheckError(check_id=check_id, error_type=type(exc).__name__, message=str(exc))
    if not isinstance(outcome, CheckOutcome):
        logger.error(
            "Check %s returned %s instead of CheckOutcome", check_id, type(outcome).__name__
        )
        return CheckError(
            check_id=check_id,
            error_type="TypeError",
            message=f"check returned {type(outcome).__name__}, expected CheckOutcome",
        )
    return outcome


def as_outcome(result: CheckResult) -> CheckOutcome:
    return result.to_outcome() if isinstance(result, CheckError) else result


def _unit_label(unit: RepoApp | RepoArea | None) -> str:
    if unit is None:
        return "repository"
    return f"{type(unit).__name__} {unit.name!r}"


def _fan_out(fn: Callable[[T], R], items: Sequence[T], max_workers: int | None) -> list[R]:
    """Map fn over items, concurrently when max_workers > 1; order preserved."""
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="agentready-check") as pool:
        return list(pool.map(fn, items))


def _evidence(outcome: CheckOutcome) -> list[str] | None:
    return list(outcome.evidence) if outcome.evidence else None


def _base_fields(criterion: Criterion | AreaCriterion, scope: str) -> dict[str, Any]:
    return {
        "id": criterion.id,
        "title": criterion.title,
        "pillar": criterion.pillar,
        "level": criterion.level,
        "scope": scope,
        "impact": criterion.impact,
        "effort": criterion.effort,
    }


def _repo_result(criterion: Criterion, result: CheckResult) -> CriterionResult:
    outcome = as_outcome(result)
    return CriterionResult(
        **_base_fields(criterion, criterion.scope),
        status=outcome.status,
        reason=outcome.reason,
        evidence=_evidence(outcome),
    )


def aggregate_app_outcomes(
    criterion: Criterion,
    apps: Sequence[RepoApp],
    results: Sequence[CheckResult],
) -> CriterionResult:
    """Collapse per-app outcomes into one criterion result.

    passRate = passed / total; the criterion passes when passRate reaches
    APP_PASS_RATE (inclusive). appFailures lists every app that did not pass.
    """
    if not apps:
        return CriterionResult(
            **_base_fields(criterion, "app"),
            status="skip",
            reason=NO_APPS_REASON,
        )
    outcomes = [as_outcome(r) for r in results]
    passed = sum(1 for o in outcomes if o.status == "pass")
    total = len(apps)
    pass_rate = passed / total
    status = "pass" if pass_rate >= APP_PASS_RATE else "fail"
    failures = [app.name for app, o in zip(apps, outcomes) if o.status != "pass"]
    return CriterionResult(
        **_base_fields(criterion, "app"),
        status=status,
        reason=None if status == "pass" else app_failure_reason(passed, total),
        pass_rate=pass_rate,
        app_summary=AppSummary(passed=passed, total=total),
        app_failures=failures,
    )


def evaluate_criteria(
    criteria: Iterable[Criterion],
    context: ReadinessContext,
    *,
    max_workers: int | None = None,
) -> list[CriterionResult]:
    """Run every criterion check and return results in criteria order."""
    criteria = list(criteria)
    apps = list(context.apps)
    tasks: list[tuple[Criterion, RepoApp | None]] = []
    for criterion in criteria:
        if criterion.scope == "repo":
            tasks.append((criterion, None))
        else:
            tasks.extend((criterion, app) for app in apps)

    raw = _fan_out(
        lambda task: run_check_isolated(task[0].id, task[0].check, context, task[1]),
        tasks,
        max_workers,
    )

    it = iter(raw)
    results: list[CriterionResult] = []
    for criterion in criteria:
        if criterion.scope == "repo":
            results.append(_repo_result(criterion, next(it)))
        else:
            per_app = [next(it) for _ in apps]
            results.append(aggregate_app_outcomes(criterion, apps, per_app))
    return results


def evaluate_extras(
    extras: Iterable[ExtraDefinition],
    context: ReadinessContext,
    *,
    max_workers: int | None = None,
) -> list[ExtraResult]:
    """Run extra checks once each against the repository."""
    extras = list(extras)
    raw = _fan_out(
        lambda extra: run_check_isolated(extra.id, extra.check, context),
        extras,
        max_workers,
    )
    results = []
    for extra, result in zip(extras, raw):
        outcome = as_outcome(result)
        results.append(
            ExtraResult(
                id=extra.id,
                title=extra.title,
                status=outcome.status,
                reason=outcome.reason,
                evidence=_evidence(outcome),
            )
        )
    return results


def evaluate_area(
    area_criteria: Iterable[AreaCriterion],
    context: ReadinessContext,
    area: RepoArea,
) -> list[CriterionResult]:
    """Run area criteria against one area."""
    results = []
    for criterion in area_criteria:
        outcome = as_outcome(run_check_isolated(criterion.id, criterion.check, context, area))
        results.append(
            CriterionResult(
                **_base_fields(criterion, "area"),
                status=outcome.status,
                reason=outcome.reason,
                evidence=_evidence(outcome),
            )
        )
    return results
