"""Readiness scoring constants.

Two independent 0.8 ratios live here on purpose:

- APP_PASS_RATE: fixed share of application units that must pass for an
  app-scope criterion to pass. Not configurable by policies.
- DEFAULT_PASS_RATE: level-achievement bar; policies override it through
  ``thresholds.passRate``.
"""

from __future__ import annotations

from agentready.policies.models import DEFAULT_PASS_RATE

# ── App-scope aggregation ───────────────────────────────────────────────

APP_PASS_RATE: float = 0.8

NO_APPS_REASON: str = "No application packages detected."


def app_failure_reason(passed: int, total: int) -> str:
    return f"Only {passed}/{total} apps pass this check."


# ── Levels ──────────────────────────────────────────────────────────────

LEVELS: tuple[int, ...] = (1, 2, 3, 4, 5)
NO_LEVEL: int = 0

__all__ = [
    "APP_PASS_RATE",
    "DEFAULT_PASS_RATE",
    "LEVELS",
    "NO_APPS_REASON",
    "NO_LEVEL",
    "app_failure_reason",
]
