"""Tests for the core catalogue loader and validator."""

from __future__ import annotations

import pytest

from agentready.core_catalogue.loader import (
    get_level_names,
    get_pillar_ids,
    get_pillar_names,
    is_valid_pillar,
    load_core_catalogue,
)
from agentready.core_catalogue.validator import (
    CoreCatalogueValidationError,
    validate_core_catalogue,
)

EXPECTED_PILLARS = (
    "style-validation",
    "build-system",
    "testing",
    "documentation",
    "dev-environment",
    "code-quality",
    "observability",
    "security-governance",
)


def _levels() -> list[dict]:
    names = ["Functional", "Documented", "Standardized", "Optimized", "Autonomous"]
    return [{"level": i, "name": n} for i, n in enumerate(names, start=1)]


class TestLoadCoreCatalogue:
    """Tests for load_core_catalogue."""

    def test_returns_dict(self) -> None:
        """load_core_catalogue returns the parsed mapping."""
        catalogue = load_core_catalogue()
        assert isinstance(catalogue, dict)
        assert catalogue["pillars"]

    def test_cached_same_object(self) -> None:
        """Repeated calls return the same cached object (lru_cache)."""
        assert load_core_catalogue() is load_core_catalogue()


class TestAccessors:
    """Pillar and level accessors."""

    def test_pillar_ids_in_display_order(self) -> None:
        """Pillar ids keep catalogue order."""
        assert get_pillar_ids() == EXPECTED_PILLARS

    def test_pillar_names(self) -> None:
        """Pillar names are keyed by id."""
        names = get_pillar_names()
        assert names["security-governance"] == "Security & Governance"
        assert set(names) == set(EXPECTED_PILLARS)

    def test_level_names(self) -> None:
        """All five level names are present."""
        assert get_level_names() == {
            1: "Functional",
            2: "Documented",
            3: "Standardized",
            4: "Optimized",
            5: "Autonomous",
        }

    def test_is_valid_pillar(self) -> None:
        """Only catalogue pillar ids are valid."""
        assert is_valid_pillar("testing") is True
        assert is_valid_pillar("ai-tooling") is False
        assert is_valid_pillar("") is False


class TestValidateCoreCatalogue:
    """Tests for validate_core_catalogue."""

    def test_valid_catalogue_passes(self) -> None:
        """A minimal valid catalogue passes."""
        validate_core_catalogue({"pillars": [{"id": "testing", "name": "Testing"}], "levels": _levels()})

    def test_raises_when_not_dict(self) -> None:
        """A non-dict catalogue is rejected."""
        with pytest.raises(CoreCatalogueValidationError, match="must be a dict"):
            validate_core_catalogue([])  # type: ignore[arg-type]

    def test_raises_when_pillars_missing(self) -> None:
        """The pillars key is required."""
        with pytest.raises(ValueError, match="pillars"):
            validate_core_catalogue({"levels": _levels()})

    def test_raises_when_pillars_empty(self) -> None:
        """The pillars list must not be empty."""
        with pytest.raises(ValueError, match="must not be empty"):
            validate_core_catalogue({"pillars": [], "levels": _levels()})

    def test_raises_on_duplicate_pillar(self) -> None:
        """Pillar ids must be unique."""
        pillars = [{"id": "testing", "name": "Testing"}, {"id": "testing", "name": "Again"}]
        with pytest.raises(ValueError, match="duplicate id"):
            validate_core_catalogue({"pillars": pillars, "levels": _levels()})

    def test_raises_when_pillar_name_missing(self) -> None:
        """Every pillar needs a name."""
        with pytest.raises(ValueError, match="non-empty name"):
            validate_core_catalogue({"pillars": [{"id": "testing"}], "levels": _levels()})

    def test_raises_when_levels_out_of_order(self) -> None:
        """Levels must be listed 1 to 5 in order."""
        levels = list(reversed(_levels()))
        with pytest.raises(ValueError, match="levels"):
            validate_core_catalogue({"pillars": [{"id": "t", "name": "T"}], "levels": levels})

    def test_raises_when_level_missing(self) -> None:
        """All five levels are required."""
        with pytest.raises(ValueError, match=r"\[1, 2, 3, 4\]"):
            validate_core_catalogue({"pillars": [{"id": "t", "name": "T"}], "levels": _levels()[:4]})
