"""Markdown rendering of a ReadinessReport (pure presentation)."""

from __future__ import annotations

from agentready import __version__
from agentready.schemas.readiness import CriterionResult, PillarSummary, ReadinessReport

_STATUS_ICONS = {"pass": "✅", "fail": "❌", "skip": "⏭️"}
_IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}
_EFFORT_ORDER = {"low": 0, "medium": 1, "high": 2}
FIX_FIRST_LIMIT = 10


def _pct(rate: float) -> str:
    return f"{round(rate * 100)}%"


def _pillar_icon(summary: PillarSummary, threshold: float) -> str:
    if summary.total == 0:
        return "➖"
    return "✅" if summary.pass_rate >= threshold else "⚠️"


def _pillar_table(pillars: list[PillarSummary], threshold: float) -> list[str]:
    lines = ["| Pillar | Passed | Total | Rate |", "| --- | --- | --- | --- |"]
    for p in pillars:
        lines.append(
            f"| {_pillar_icon(p, threshold)} {p.name} | {p.passed} | {p.total} | {_pct(p.pass_rate)} |"
        )
    return lines


def _fix_first(criteria: list[CriterionResult]) -> list[CriterionResult]:
    failing = [c for c in criteria if c.status == "fail"]
    failing.sort(
        key=lambda c: (c.level, _IMPACT_ORDER.get(c.impact, 9), _EFFORT_ORDER.get(c.effort, 9))
    )
    return failing[:FIX_FIRST_LIMIT]


def format_readiness_markdown(report: ReadinessReport, repo_name: str) -> str:
    """Render the report as a Markdown document."""
    level_names = {lv.level: lv.name for lv in report.levels}
    threshold = report.pass_rate_threshold
    lines = [f"# AI Readiness Report: {repo_name}", ""]

    if report.achieved_level:
        lines.append(f"**Level {report.achieved_level}** — {level_names.get(report.achieved_level, '')}")
    else:
        lines.append("**Level 0** — Not yet functional")
    lines.append("")
    if report.policies:
        lines += [f"Policies: {', '.join(report.policies)}", ""]

    lines += ["## Repo Health", ""]
    lines += _pillar_table(report.pillars, threshold)
    lines.append("")

    lines += ["## Levels", "", "| Level | Passed | Total | Rate | Achieved |", "| --- | --- | --- | --- | --- |"]
    for lv in report.levels:
        mark = "✅" if lv.achieved else "❌"
        lines.append(f"| {lv.level}. {lv.name} | {lv.passed} | {lv.total} | {_pct(lv.pass_rate)} | {mark} |")
    lines.append("")

    fix_first = _fix_first(report.criteria)
    if fix_first:
        lines += ["## Fix First", ""]
        for c in fix_first:
            detail = f": {c.reason}" if c.reason else ""
            lines.append(f"- **{c.title}** (level {c.level}, {c.impact} impact, {c.effort} effort){detail}")
        lines.append("")

    if report.extras:
        lines += ["## AI Readiness Extras", ""]
        for extra in report.extras:
            lines.append(f"- {_STATUS_ICONS.get(extra.status, '')} {extra.title}")
        lines.append("")

    if report.area_reports:
        lines += ["## Per-Area Breakdown", ""]
        for area_report in report.area_reports:
            lines += [f"### {area_report.area.name}", "", f"`{area_report.area.apply_to}`", ""]
            for c in area_report.criteria:
                lines.append(f"- {_STATUS_ICONS.get(c.status, '')} {c.title}")
            lines.append("")

    generated = report.generated_at.strftime("%Y-%m-%d %H:%M UTC")
    lines += ["---", f"_Generated by agentready {__version__} on {generated}._", ""]
    return "\n".join(lines)
