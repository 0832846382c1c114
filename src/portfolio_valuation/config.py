"""
Client settings.
Loaded from environment variables prefixed with VALUATION_.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the API clients and the CLI."""

    model_config = SettingsConfigDict(env_prefix="VALUATION_", env_file=".env", extra="ignore")

    API_BASE_URL: str = "http://localhost:3000/api"
    REQUEST_TIMEOUT: float = 30.0
    MAX_RETRIES: int = 3
    # multiplier for exponential backoff between retries, in seconds
    RETRY_BACKOFF: float = 1.0

    LOG_LEVEL: str = "INFO"
    CURRENCY: str = "USD"

    ENABLE_TRADING: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
