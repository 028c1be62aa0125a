"""Catalog configuration settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class Settings(BaseSettings):
    """Catalog settings loaded from GEMINI_CATALOG_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials
    api_key: str | None = None

    # Endpoints
    api_base: str = DEFAULT_API_BASE

    # Discovery cache
    cache_ttl_seconds: float = 15 * 60

    # HTTP
    discovery_timeout: float = 30.0
    request_timeout: float = 60.0
    max_retries: int = 2

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: float) -> float:
        """Validate the discovery cache TTL is positive."""
        if v <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must not be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
