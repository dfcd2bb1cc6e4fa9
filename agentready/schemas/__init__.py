"""Pydantic schemas for readiness reports."""

from agentready.schemas.readiness import (
    AppInfo,
    AppSummary,
    AreaInfo,
    AreaReport,
    CriterionResult,
    ExtraResult,
    LevelSummary,
    PillarSummary,
    ReadinessReport,
)

__all__ = [
    "AppInfo",
    "AppSummary",
    "AreaInfo",
    "AreaReport",
    "CriterionResult",
    "ExtraResult",
    "LevelSummary",
    "PillarSummary",
    "ReadinessReport",
]
