"""Tests for pillar/level aggregation and the achieved-level rule."""

from __future__ import annotations

import pytest

from agentready.core_catalogue import get_pillar_ids
from agentready.schemas.readiness import CriterionResult
from agentready.services.readiness.aggregator import (
    compute_achieved_level,
    count_status,
    summarize_levels,
    summarize_pillars,
)


def _result(id: str, status: str, *, level: int = 1, pillar: str = "documentation") -> CriterionResult:
    return CriterionResult(
        id=id,
        title=id,
        pillar=pillar,
        level=level,
        scope="repo",
        impact="medium",
        effort="low",
        status=status,
    )


class TestCountStatus:
    def test_skips_are_excluded(self) -> None:
        """Skipped results count toward neither passed nor total."""
        results = [_result("a", "pass"), _result("b", "fail"), _result("c", "skip")]
        assert count_status(results) == (1, 2)

    def test_empty(self) -> None:
        """No results give zero counts."""
        assert count_status([]) == (0, 0)


class TestSummarizePillars:
    """One summary per catalogue pillar."""

    def test_covers_all_pillars_in_catalogue_order(self) -> None:
        """Every catalogue pillar appears, in catalogue order."""
        summaries = summarize_pillars([])
        assert [s.id for s in summaries] == list(get_pillar_ids())
        assert len(summaries) == 8
        assert all(s.total == 0 and s.pass_rate == 0 for s in summaries)

    def test_counts_per_pillar(self) -> None:
        """Passed and total are counted per pillar."""
        results = [
            _result("a", "pass", pillar="testing"),
            _result("b", "fail", pillar="testing"),
            _result("c", "skip", pillar="testing"),
            _result("d", "pass", pillar="security-governance"),
        ]
        by_id = {s.id: s for s in summarize_pillars(results)}
        assert (by_id["testing"].passed, by_id["testing"].total) == (1, 2)
        assert by_id["testing"].pass_rate == 0.5
        assert by_id["security-governance"].pass_rate == 1.0
        assert by_id["testing"].name == "Testing"


class TestSummarizeLevels:
    """Level summaries and the cascading gate."""

    def test_lower_level_failure_blocks_higher_levels(self) -> None:
        """Level 1 at 50% blocks level 2 even though level 2 is at 100%."""
        results = [
            _result("a", "pass", level=1),
            _result("b", "fail", level=1),
            _result("c", "pass", level=2),
        ]
        levels = summarize_levels(results, 0.8)
        assert levels[0].pass_rate == 0.5
        assert levels[0].achieved is False
        assert levels[1].pass_rate == 1.0
        assert levels[1].achieved is False
        assert compute_achieved_level(levels) == 0

    def test_empty_levels_are_vacuously_achieved(self) -> None:
        """A level with no counted criteria is achieved."""
        results = [_result("a", "pass", level=1), _result("b", "pass", level=3)]
        levels = summarize_levels(results, 0.8)
        assert [lv.achieved for lv in levels] == [True, True, True, True, True]
        assert compute_achieved_level(levels) == 5

    def test_stops_at_first_failing_level(self) -> None:
        """The achieved level stops below the first failing level."""
        results = [
            _result("a", "pass", level=1),
            _result("b", "pass", level=2),
            _result("c", "fail", level=3),
            _result("d", "pass", level=4),
        ]
        levels = summarize_levels(results, 0.8)
        assert [lv.achieved for lv in levels] == [True, True, False, False, False]
        assert compute_achieved_level(levels) == 2

    def test_threshold_is_inclusive(self) -> None:
        """A pass rate equal to the threshold achieves the level."""
        results = [_result(f"p{i}", "pass") for i in range(4)] + [_result("f", "fail")]
        levels = summarize_levels(results, 0.8)
        assert levels[0].pass_rate == 0.8
        assert levels[0].achieved is True

    @pytest.mark.parametrize("threshold,expected", [(0.5, 5), (0.51, 0), (0.0, 5), (1.0, 0)])
    def test_threshold_changes_outcome(self, threshold: float, expected: int) -> None:
        """Raising the threshold lowers the achieved level."""
        results = [_result("a", "pass"), _result("b", "fail")]
        assert compute_achieved_level(summarize_levels(results, threshold)) == expected

    def test_skipped_only_level_is_vacuous(self) -> None:
        """A level holding only skips is achieved."""
        results = [_result("a", "skip", level=1), _result("b", "pass", level=2)]
        levels = summarize_levels(results, 0.8)
        assert levels[0].total == 0
        assert levels[0].achieved is True
        assert compute_achieved_level(levels) == 5

    def test_level_names_from_catalogue(self) -> None:
        """Level names come from the catalogue."""
        names = [lv.name for lv in summarize_levels([], 0.8)]
        assert names == ["Functional", "Documented", "Standardized", "Optimized", "Autonomous"]
