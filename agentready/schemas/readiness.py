"""Readiness report DTOs.

Serialized with camelCase aliases (``passRate``, ``achievedLevel``...) via
``model_dump(by_alias=True, exclude_none=True)``; every model is frozen, a
report is a terminal snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

StatusLiteral = Literal["pass", "fail", "skip"]


class _ReportModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class AppSummary(_ReportModel):
    passed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class CriterionResult(_ReportModel):
    """One criterion's metadata plus its (aggregated) outcome."""

    id: str = Field(..., min_length=1)
    title: str
    pillar: str
    level: int = Field(..., ge=1, le=5)
    scope: Literal["repo", "app", "area"]
    impact: Literal["high", "medium", "low"]
    effort: Literal["low", "medium", "high"]
    status: StatusLiteral
    reason: str | None = None
    evidence: list[str] | None = None
    pass_rate: float | None = Field(None, alias="passRate", ge=0, le=1)
    app_summary: AppSummary | None = Field(None, alias="appSummary")
    app_failures: list[str] | None = Field(None, alias="appFailures")


class ExtraResult(_ReportModel):
    id: str = Field(..., min_length=1)
    title: str
    status: StatusLiteral
    reason: str | None = None
    evidence: list[str] | None = None


class PillarSummary(_ReportModel):
    id: str
    name: str
    passed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    pass_rate: float = Field(..., alias="passRate", ge=0, le=1)


class LevelSummary(_ReportModel):
    level: int = Field(..., ge=1, le=5)
    name: str
    passed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    pass_rate: float = Field(..., alias="passRate", ge=0, le=1)
    achieved: bool


class AppInfo(_ReportModel):
    name: str
    path: str


class AreaInfo(_ReportModel):
    name: str
    apply_to: str = Field(..., alias="applyTo")
    source: str = "config"


class AreaReport(_ReportModel):
    """Per-area breakdown: same pillar aggregation, area criteria only."""

    area: AreaInfo
    criteria: list[CriterionResult]
    pillars: list[PillarSummary]


class ReadinessReport(_ReportModel):
    """Self-describing readiness report for one repository."""

    repo_path: str = Field(..., alias="repoPath")
    generated_at: datetime = Field(..., alias="generatedAt")
    is_monorepo: bool = Field(False, alias="isMonorepo")
    apps: list[AppInfo] = Field(default_factory=list)
    pillars: list[PillarSummary]
    levels: list[LevelSummary]
    achieved_level: int = Field(..., alias="achievedLevel", ge=0, le=5)
    criteria: list[CriterionResult]
    extras: list[ExtraResult] = Field(default_factory=list)
    policies: list[str] = Field(default_factory=list, description="Applied policy chain, in order")
    pass_rate_threshold: float = Field(..., alias="passRateThreshold", ge=0, le=1)
    area_reports: list[AreaReport] | None = Field(None, alias="areaReports")

    def to_json_dict(self) -> dict:
        """Return the JSON-ready dict (camelCase keys, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
