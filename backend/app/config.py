"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Connection strings come from environment variables or .env (never hardcoded in code paths)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults provided for every setting: works out-of-the-box against a local mongod
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document store
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "catalog"
    mongodb_timeout_ms: int = 5000

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Response pipeline
    normalize_max_depth: int = Field(64, ge=1, le=512)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
