"""Core catalogue schema validation.

Validates that catalogue.yaml has the required structure:
- pillars: non-empty list of {id, name} with unique non-empty ids
- levels: exactly levels 1..5, in order, each with a non-empty name
"""

from __future__ import annotations

from typing import Any

EXPECTED_LEVELS: tuple[int, ...] = (1, 2, 3, 4, 5)


class CoreCatalogueValidationError(ValueError):
    """Raised when core catalogue validation fails.

    Subclasses ValueError so callers can catch it via ``except ValueError``
    alongside ``FileNotFoundError`` without needing to import this class.
    """


def validate_core_catalogue(catalogue: dict[str, Any]) -> None:
    """Validate core catalogue structure.

    Args:
        catalogue: Loaded catalogue.yaml content.

    Raises:
        CoreCatalogueValidationError: When structure or ordering is invalid.
    """
    if not isinstance(catalogue, dict):
        raise CoreCatalogueValidationError("core catalogue must be a dict")

    pillars = catalogue.get("pillars")
    if pillars is None:
        raise CoreCatalogueValidationError("core catalogue must have 'pillars'")
    if not isinstance(pillars, list):
        raise CoreCatalogueValidationError("core catalogue 'pillars' must be a list")
    if len(pillars) == 0:
        raise CoreCatalogueValidationError("core catalogue 'pillars' must not be empty")

    seen: set[str] = set()
    for i, entry in enumerate(pillars):
        if not isinstance(entry, dict):
            raise CoreCatalogueValidationError(f"core catalogue pillars[{i}] must be a dict")
        pid = entry.get("id")
        if pid is None or not isinstance(pid, str) or not pid.strip():
            raise CoreCatalogueValidationError(
                f"core catalogue pillars[{i}].id must be a non-empty string, got {pid!r}"
            )
        if pid in seen:
            raise CoreCatalogueValidationError(
                f"core catalogue 'pillars' contains duplicate id: '{pid}'"
            )
        seen.add(pid)
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CoreCatalogueValidationError(
                f"core catalogue pillars[{i}] ('{pid}') must have a non-empty name"
            )

    levels = catalogue.get("levels")
    if not isinstance(levels, list):
        raise CoreCatalogueValidationError("core catalogue 'levels' must be a list")
    numbers = tuple(entry.get("level") if isinstance(entry, dict) else None for entry in levels)
    if numbers != EXPECTED_LEVELS:
        raise CoreCatalogueValidationError(
            f"core catalogue 'levels' must define levels {list(EXPECTED_LEVELS)} in order, "
            f"got {list(numbers)}"
        )
    for entry in levels:
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CoreCatalogueValidationError(
                f"core catalogue level {entry['level']} must have a non-empty name"
            )
