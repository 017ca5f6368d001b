"""Client configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment and .env.

    Every field has a default; validate_urls_and_limits rejects values that
    would make the session unusable (bad API URL, non-positive limits).
    """

    # App
    app_name: str = "viewcache"
    app_version: str = "1.0.0"
    debug: bool = False

    # Remote API
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: float = 30.0
    client_id: str = "web"

    # Redis entity cache (falls back to in-memory storage when disabled or unreachable)
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    # None = entries never expire; staleness is handled by invalidation, not TTL.
    cache_ttl_entities: int | None = None

    # Retrieval
    max_pending_invalidations: int = 64

    # Collab sync (Redis pub/sub)
    sync_enabled: bool = False
    sync_channel_prefix: str = "collab_sync"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_urls_and_limits(self) -> "Settings":
        """Validate API URL scheme and positive limits."""
        if not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"api_base_url must start with http:// or https://, got: {self.api_base_url!r}"
            )
        if self.api_timeout_seconds <= 0:
            raise ValueError("api_timeout_seconds must be positive")
        if self.max_pending_invalidations < 1:
            raise ValueError("max_pending_invalidations must be at least 1")
        if self.cache_ttl_entities is not None and self.cache_ttl_entities < 1:
            raise ValueError(
                "cache_ttl_entities must be a positive number of seconds or unset"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
