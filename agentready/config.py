"""
Engine configuration. Loads from environment variables (and a local .env).
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Engine settings loaded from environment."""

    log_level: str = "WARNING"

    # Policies applied to every run, after the repository config file and
    # before operator --policy references. Comma-separated references.
    default_policies: list[str] = []

    # Repository-level config file; policies listed there load as data only.
    config_file: str = "agentready.config.json"

    # 1 = evaluate checks sequentially
    max_workers: int = 1

    def __init__(self) -> None:
        self.log_level = os.getenv("AGENTREADY_LOG_LEVEL", self.log_level).upper()

        _policies = os.getenv("AGENTREADY_POLICIES", "").strip()
        self.default_policies = [s.strip() for s in _policies.split(",") if s.strip()]

        self.config_file = os.getenv("AGENTREADY_CONFIG_FILE", self.config_file)
        self.max_workers = max(1, int(os.getenv("AGENTREADY_MAX_WORKERS", str(self.max_workers))))
