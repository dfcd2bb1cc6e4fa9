"""Tests for Markdown rendering of readiness reports."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from agentready.schemas.readiness import (
    AreaInfo,
    AreaReport,
    CriterionResult,
    ExtraResult,
    LevelSummary,
    PillarSummary,
    ReadinessReport,
)
from agentready.services.readiness.markdown import format_readiness_markdown


def _criterion(id: str, title: str, status: str, *, reason: str | None = None, level: int = 1) -> CriterionResult:
    return CriterionResult(
        id=id,
        title=title,
        pillar="documentation",
        level=level,
        scope="repo",
        impact="high",
        effort="low",
        status=status,
        reason=reason,
    )


def _make_report(**overrides) -> ReadinessReport:
    defaults = dict(
        repo_path="/tmp/test-repo",
        generated_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        pillars=[
            PillarSummary(id="style-validation", name="Style & Validation", passed=2, total=2, pass_rate=1.0),
            PillarSummary(id="build-system", name="Build System", passed=1, total=2, pass_rate=0.5),
            PillarSummary(id="observability", name="Observability", passed=0, total=0, pass_rate=0.0),
        ],
        levels=[
            LevelSummary(level=1, name="Functional", passed=5, total=6, pass_rate=5 / 6, achieved=True),
            LevelSummary(level=2, name="Documented", passed=3, total=6, pass_rate=0.5, achieved=False),
        ],
        achieved_level=1,
        criteria=[
            _criterion("lint-config", "Linting configured", "pass"),
            _criterion("readme", "README present", "fail", reason="Missing README documentation."),
        ],
        extras=[
            ExtraResult(id="agents-doc", title="AGENTS.md present", status="pass"),
            ExtraResult(id="architecture-doc", title="Architecture guide present", status="fail"),
        ],
        policies=["strict"],
        pass_rate_threshold=0.8,
    )
    defaults.update(overrides)
    return ReadinessReport(**defaults)


class TestFormatReadinessMarkdown:
    """format_readiness_markdown output."""

    def test_heading_and_level(self) -> None:
        """The heading names the repository and the achieved level."""
        md = format_readiness_markdown(_make_report(), "my-repo")
        assert "# AI Readiness Report: my-repo" in md
        assert "**Level 1** — Functional" in md

    def test_level_zero(self) -> None:
        """Level 0 is rendered when no level is achieved."""
        md = format_readiness_markdown(_make_report(achieved_level=0), "my-repo")
        assert "**Level 0**" in md

    def test_pillar_table(self) -> None:
        """Pillar rows carry an icon, counts and a percentage."""
        md = format_readiness_markdown(_make_report(), "my-repo")
        assert "## Repo Health" in md
        assert "| Pillar | Passed | Total | Rate |" in md
        assert "| ✅ Style & Validation | 2 | 2 | 100% |" in md
        assert "| ⚠️ Build System | 1 | 2 | 50% |" in md
        assert "| ➖ Observability | 0 | 0 | 0% |" in md

    def test_fix_first_lists_failures(self) -> None:
        """Failing criteria appear under Fix First with their reason."""
        md = format_readiness_markdown(_make_report(), "my-repo")
        assert "## Fix First" in md
        assert "README present" in md
        assert "Missing README documentation." in md

    def test_no_fix_first_when_all_pass(self) -> None:
        """Fix First is omitted when nothing fails."""
        report = _make_report(criteria=[_criterion("lint-config", "Linting configured", "pass")])
        assert "## Fix First" not in format_readiness_markdown(report, "my-repo")

    def test_fix_first_orders_by_level(self) -> None:
        """Lower-level failures come first."""
        report = _make_report(
            criteria=[
                _criterion("late", "Level three thing", "fail", level=3),
                _criterion("early", "Level one thing", "fail", level=1),
            ]
        )
        md = format_readiness_markdown(report, "my-repo")
        assert md.index("Level one thing") < md.index("Level three thing")

    def test_extras_section(self) -> None:
        """Extras are listed with pass and fail icons."""
        md = format_readiness_markdown(_make_report(), "my-repo")
        assert "## AI Readiness Extras" in md
        assert "✅ AGENTS.md present" in md
        assert "❌ Architecture guide present" in md

    def test_no_extras_section_when_empty(self) -> None:
        """The extras section is omitted when there are none."""
        assert "## AI Readiness Extras" not in format_readiness_markdown(_make_report(extras=[]), "r")

    def test_area_breakdown(self) -> None:
        """Each area gets its own subsection."""
        area = AreaReport(
            area=AreaInfo(name="frontend", apply_to="frontend/**"),
            criteria=[
                CriterionResult(
                    id="area-readme",
                    title="Area README present",
                    pillar="documentation",
                    level=1,
                    scope="area",
                    impact="medium",
                    effort="low",
                    status="fail",
                    reason="Missing README in area directory.",
                )
            ],
            pillars=[],
        )
        md = format_readiness_markdown(_make_report(area_reports=[area]), "my-repo")
        assert "## Per-Area Breakdown" in md
        assert "### frontend" in md
        assert "❌ Area README present" in md

    def test_footer_and_policies(self) -> None:
        """The applied policies and generation date are shown."""
        md = format_readiness_markdown(_make_report(), "my-repo")
        assert "Policies: strict" in md
        assert "2026-01-01" in md
        assert "agentready" in md

    @pytest.mark.parametrize("threshold,icon", [(0.5, "✅"), (0.9, "⚠️")])
    def test_pillar_icon_follows_threshold(self, threshold: float, icon: str) -> None:
        """The pillar icon compares against the report's threshold."""
        md = format_readiness_markdown(_make_report(pass_rate_threshold=threshold), "my-repo")
        assert f"| {icon} Build System |" in md
