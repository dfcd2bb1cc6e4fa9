"""
Configuration tests.
"""

import pytest

from agentready.config import Settings, get_settings


def test_get_settings_returns_settings() -> None:
    """get_settings returns a Settings instance."""
    settings = get_settings()
    assert isinstance(settings, Settings)


def test_get_settings_is_cached() -> None:
    """get_settings returns the cached instance."""
    assert get_settings() is get_settings()


def test_defaults() -> None:
    """Defaults apply when no AGENTREADY_* variables are set."""
    settings = get_settings()
    assert settings.log_level == "WARNING"
    assert settings.default_policies == []
    assert settings.config_file == "agentready.config.json"
    assert settings.max_workers == 1


def test_values_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings load from environment variables."""
    monkeypatch.setenv("AGENTREADY_LOG_LEVEL", "debug")
    monkeypatch.setenv("AGENTREADY_POLICIES", " strict.json, team.policy ,")
    monkeypatch.setenv("AGENTREADY_CONFIG_FILE", ".agentready.json")
    monkeypatch.setenv("AGENTREADY_MAX_WORKERS", "8")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.default_policies == ["strict.json", "team.policy"]
    assert settings.config_file == ".agentready.json"
    assert settings.max_workers == 8


def test_max_workers_floor(monkeypatch: pytest.MonkeyPatch) -> None:
    """max_workers below 1 is clamped to sequential."""
    monkeypatch.setenv("AGENTREADY_MAX_WORKERS", "0")
    get_settings.cache_clear()
    assert get_settings().max_workers == 1


def test_class_defaults() -> None:
    """Class-level defaults match the instance types."""
    assert Settings.default_policies == []
    assert Settings.config_file == "agentready.config.json"
