"""Core catalogue loader.

Provides the fixed pillar tags and maturity level names used for aggregation
and report display. Criterion definitions are not part of the catalogue.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

_CATALOGUE_PATH = Path(__file__).parent / "catalogue.yaml"


@lru_cache(maxsize=1)
def load_core_catalogue() -> dict[str, Any]:
    """Load and return the core catalogue YAML content.

    Returns:
        Dict with 'pillars' (list of {id, name, description}) and 'levels'
        (list of {level, name, description}).

    Raises:
        FileNotFoundError: If catalogue.yaml is missing.
        CoreCatalogueValidationError: If the catalogue is structurally invalid.
    """
    from agentready.core_catalogue.validator import validate_core_catalogue

    try:
        with _CATALOGUE_PATH.open(encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Core catalogue YAML is malformed: {exc}") from exc
    validate_core_catalogue(data)
    return data


@lru_cache(maxsize=1)
def get_pillar_ids() -> tuple[str, ...]:
    """Return pillar ids in catalogue (display) order."""
    return tuple(p["id"] for p in load_core_catalogue()["pillars"])


@lru_cache(maxsize=1)
def get_pillar_names() -> dict[str, str]:
    """Return pillar id -> display name."""
    return {p["id"]: p["name"] for p in load_core_catalogue()["pillars"]}


@lru_cache(maxsize=1)
def get_level_names() -> dict[int, str]:
    """Return level number -> display name."""
    return {lv["level"]: lv["name"] for lv in load_core_catalogue()["levels"]}


def is_valid_pillar(pillar: str) -> bool:
    """Return True if pillar is one of the catalogue's pillar ids."""
    return pillar in get_pillar_ids()
