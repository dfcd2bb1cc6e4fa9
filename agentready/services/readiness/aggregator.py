"""Aggregate criterion results into pillar and level summaries.

Results with status ``skip`` are excluded from every count. A level is
achieved only when it and every level below it either has no counted
criteria or reaches the pass-rate threshold; achievedLevel is the highest
such level, or 0.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from agentready.core_catalogue import get_level_names, get_pillar_ids, get_pillar_names
from agentready.schemas.readiness import CriterionResult, LevelSummary, PillarSummary
from agentready.services.readiness.scoring_constants import LEVELS, NO_LEVEL


def count_status(results: Iterable[CriterionResult]) -> tuple[int, int]:
    """Return (passed, total) over non-skipped results."""
    passed = total = 0
    for r in results:
        if r.status == "skip":
            continue
        total += 1
        if r.status == "pass":
            passed += 1
    return passed, total


def _rate(passed: int, total: int) -> float:
    return passed / total if total else 0.0


def summarize_pillars(
    results: Sequence[CriterionResult],
    pillar_ids: Sequence[str] | None = None,
) -> list[PillarSummary]:
    """One summary per catalogue pillar, in catalogue order."""
    names = get_pillar_names()
    summaries = []
    for pillar in pillar_ids if pillar_ids is not None else get_pillar_ids():
        passed, total = count_status(r for r in results if r.pillar == pillar)
        summaries.append(
            PillarSummary(
                id=pillar,
                name=names.get(pillar, pillar),
                passed=passed,
                total=total,
                pass_rate=_rate(passed, total),
            )
        )
    return summaries


def summarize_levels(results: Sequence[CriterionResult], pass_rate: float) -> list[LevelSummary]:
    """One summary per level 1..5 with the cascading ``achieved`` flag."""
    names = get_level_names()
    summaries = []
    gate_open = True
    for level in LEVELS:
        passed, total = count_status(r for r in results if r.level == level)
        rate = _rate(passed, total)
        gate_open = gate_open and (total == 0 or rate >= pass_rate)
        summaries.append(
            LevelSummary(
                level=level,
                name=names.get(level, f"Level {level}"),
                passed=passed,
                total=total,
                pass_rate=rate,
                achieved=gate_open,
            )
        )
    return summaries


def compute_achieved_level(levels: Sequence[LevelSummary]) -> int:
    """Highest achieved level, 0 when level 1 is not achieved."""
    achieved = NO_LEVEL
    for summary in sorted(levels, key=lambda s: s.level):
        if not summary.achieved:
            break
        achieved = summary.level
    return achieved
