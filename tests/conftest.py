"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import itertools
import json
from pathlib import Path
from typing import Any, Callable

import pytest

from agentready.config import get_settings
from agentready.core_catalogue import loader as catalogue_loader
from agentready.criteria.types import CheckOutcome, Criterion, ExtraDefinition

# Settings read the environment; keep the developer's shell out of test runs.
_ENV_VARS = (
    "AGENTREADY_LOG_LEVEL",
    "AGENTREADY_POLICIES",
    "AGENTREADY_CONFIG_FILE",
    "AGENTREADY_MAX_WORKERS",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Clear env overrides and cached loaders before and after each test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    for cached in (
        catalogue_loader.load_core_catalogue,
        catalogue_loader.get_pillar_ids,
        catalogue_loader.get_pillar_names,
        catalogue_loader.get_level_names,
    ):
        cached.cache_clear()


def _passing(context, app=None) -> CheckOutcome:
    return CheckOutcome(status="pass")


def _failing(context, app=None) -> CheckOutcome:
    return CheckOutcome(status="fail", reason="nope")


@pytest.fixture
def make_criterion() -> Callable[..., Criterion]:
    """Factory for Criterion records with sensible defaults."""

    def _make(
        id: str,
        *,
        passes: bool = True,
        title: str | None = None,
        pillar: str = "documentation",
        level: int = 1,
        scope: str = "repo",
        impact: str = "medium",
        effort: str = "low",
        check=None,
    ) -> Criterion:
        return Criterion(
            id=id,
            title=title or f"{id} title",
            pillar=pillar,
            level=level,
            scope=scope,
            impact=impact,
            effort=effort,
            check=check or (_passing if passes else _failing),
        )

    return _make


@pytest.fixture
def make_extra() -> Callable[..., ExtraDefinition]:
    """Factory for ExtraDefinition records."""

    def _make(id: str, *, passes: bool = True, title: str | None = None, check=None) -> ExtraDefinition:
        return ExtraDefinition(
            id=id,
            title=title or f"{id} title",
            check=check or (_passing if passes else _failing),
        )

    return _make


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a fresh repository tree under tmp_path per call.

    Values that are dicts or lists are written as JSON; strings as-is.
    """
    counter = itertools.count()

    def _make(files: dict[str, Any]) -> Path:
        n = next(counter)
        root = tmp_path / ("repo" if n == 0 else f"repo{n}")
        root.mkdir()
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                path.write_text(json.dumps(content), encoding="utf-8")
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make
