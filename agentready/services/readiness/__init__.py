"""Readiness evaluation: check runner, aggregation, report assembly and rendering."""

from agentready.services.readiness.aggregator import (
    compute_achieved_level,
    summarize_levels,
    summarize_pillars,
)
from agentready.services.readiness.markdown import format_readiness_markdown
from agentready.services.readiness.report import (
    build_area_reports,
    load_run_policies,
    run_readiness_report,
)
from agentready.services.readiness.runner import (
    CheckError,
    evaluate_area,
    evaluate_criteria,
    evaluate_extras,
    run_check_isolated,
)

__all__ = [
    "CheckError",
    "build_area_reports",
    "compute_achieved_level",
    "evaluate_area",
    "evaluate_criteria",
    "evaluate_extras",
    "format_readiness_markdown",
    "load_run_policies",
    "run_check_isolated",
    "run_readiness_report",
    "summarize_levels",
    "summarize_pillars",
]
