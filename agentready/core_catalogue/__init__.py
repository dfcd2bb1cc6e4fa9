"""Core readiness catalogue package.

Exposes the fixed pillar tags and level names. Criterion checks are defined
in agentready.criteria; policies may not add pillars or levels.
"""

from __future__ import annotations

from agentready.core_catalogue.loader import (
    get_level_names,
    get_pillar_ids,
    get_pillar_names,
    is_valid_pillar,
    load_core_catalogue,
)

__all__ = [
    "get_level_names",
    "get_pillar_ids",
    "get_pillar_names",
    "is_valid_pillar",
    "load_core_catalogue",
]
