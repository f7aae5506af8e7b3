"""Application configuration management.

Loads settings from environment with validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """History settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="LEXHISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Storage
    storage_backend: Literal["memory", "file", "redis"] = "file"
    history_key: str = "translationHistory"
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".lexhistory")
    on_corrupt: Literal["discard", "raise"] = "discard"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Search (0.0 = perfect match only, 1.0 = match anything)
    fuzzy_threshold: float = Field(default=0.4, ge=0.0, le=1.0)

    # Development
    debug: bool = False
    log_level: str = "INFO"

    @property
    def redis_url(self) -> str:
        """Redis connection URL."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def min_similarity(self) -> float:
        """Lowest fuzzy score a search hit may have."""
        return 1.0 - self.fuzzy_threshold


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
