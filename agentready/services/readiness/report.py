"""Readiness report assembly.

run_readiness_report() is the single entry point: build the repository
context, resolve the registry against the policy chain, evaluate, aggregate
and return a ReadinessReport. Policy loading happens before any check runs,
so an invalid policy never yields a partial report.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence

from agentready.config import get_settings
from agentready.context import ReadinessContext, build_context
from agentready.criteria.registry import Registry, build_registry
from agentready.policies import Policy, load_policies, resolve_chain, validate_policy_record
from agentready.policies.loader import PolicySource
from agentready.schemas.readiness import AppInfo, AreaInfo, AreaReport, ReadinessReport
from agentready.services.readiness.aggregator import (
    compute_achieved_level,
    summarize_levels,
    summarize_pillars,
)
from agentready.services.readiness.runner import evaluate_area, evaluate_criteria, evaluate_extras

logger = logging.getLogger(__name__)


def load_run_policies(
    context: ReadinessContext,
    operator_sources: Iterable[PolicySource] | None = None,
    *,
    default_sources: Iterable[PolicySource] | None = None,
) -> list[Policy]:
    """Load the full policy chain for one run.

    Order: policies listed in the repository config file (data only), then
    ``default_sources`` (AGENTREADY_POLICIES when None), then operator
    sources (full trust). Later policies win.

    Raises:
        PolicyValidationError: Any source is invalid or refused.
    """
    settings = get_settings()
    repo_sources = context.config.get("policies") or ()
    if isinstance(repo_sources, str) or not isinstance(repo_sources, Sequence):
        raise ValueError(f'{settings.config_file}: "policies" must be an array of policy references')

    policies = load_policies(
        repo_sources,
        data_only=True,
        config_file=settings.config_file,
        base_dir=context.repo_path,
    )
    if default_sources is None:
        default_sources = settings.default_policies
    policies += load_policies(default_sources, config_file=settings.config_file)
    policies += load_policies(operator_sources, config_file=settings.config_file)
    return policies


def build_area_reports(registry: Registry, context: ReadinessContext) -> list[AreaReport] | None:
    """Per-area breakdown, or None when the context has no areas."""
    if not context.areas or not registry.area_criteria:
        return None
    reports = []
    for area in context.areas:
        results = evaluate_area(registry.area_criteria, context, area)
        reports.append(
            AreaReport(
                area=AreaInfo(name=area.name, apply_to=area.apply_to, source=area.source),
                criteria=results,
                pillars=summarize_pillars(results),
            )
        )
    return reports


def run_readiness_report(
    repo_path: str | Path,
    *,
    policies: Sequence[Policy] = (),
    include_extras: bool = True,
    context: ReadinessContext | None = None,
    registry: Registry | None = None,
    max_workers: int | None = None,
) -> ReadinessReport:
    """Evaluate one repository and return its readiness report.

    Args:
        repo_path: Repository root.
        policies: Already-loaded policies, earliest first.
        include_extras: Evaluate extras (else the report's extras list is empty).
        context: Prebuilt context; built from repo_path when None.
        registry: Base registry; build_registry() when None.
        max_workers: Thread fan-out for checks; settings.max_workers when None.

    Raises:
        PolicyValidationError: A policy record is invalid; raised before any
            check runs.
    """
    for policy in policies:
        validate_policy_record(policy)
    if context is None:
        context = build_context(repo_path)
    if registry is None:
        registry = build_registry()
    if max_workers is None:
        max_workers = get_settings().max_workers

    resolved = resolve_chain(registry.criteria, registry.extras, policies)
    threshold = resolved.thresholds.pass_rate

    criteria_results = evaluate_criteria(resolved.criteria, context, max_workers=max_workers)
    extras_results = (
        evaluate_extras(resolved.extras, context, max_workers=max_workers) if include_extras else []
    )

    levels = summarize_levels(criteria_results, threshold)
    achieved = compute_achieved_level(levels)
    logger.info(
        "Readiness for %s: level %d (%d criteria, passRate threshold %s)",
        context.repo_path,
        achieved,
        len(criteria_results),
        threshold,
    )

    return ReadinessReport(
        repo_path=str(repo_path),
        generated_at=datetime.now(timezone.utc),
        is_monorepo=context.is_monorepo,
        apps=[AppInfo(name=app.name, path=app.path) for app in context.apps],
        pillars=summarize_pillars(criteria_results),
        levels=levels,
        achieved_level=achieved,
        criteria=criteria_results,
        extras=extras_results,
        policies=list(resolved.chain),
        pass_rate_threshold=threshold,
        area_reports=build_area_reports(registry, context),
    )
