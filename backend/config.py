"""Centralized configuration — all env vars in one place."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # "Today" is resolved in this timezone for the history feed
        self.timezone: str = os.getenv("TIMEZONE", "Asia/Shanghai")

        # Upstream fetching
        self.http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
        self.cover_proxy_host: str = os.getenv("COVER_PROXY_HOST", "https://doubanio.viki.moe")
        self.strict_upstream_schema: bool = _env_bool("STRICT_UPSTREAM_SCHEMA", False)

        # Caching
        self.ranking_cache_ttl_seconds: int = int(os.getenv("RANKING_CACHE_TTL_SECONDS", "3600"))
        self.single_flight: bool = _env_bool("SINGLE_FLIGHT", True)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of configuration problems (empty when all is well)."""
        problems = []
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            problems.append(f"TIMEZONE={self.timezone!r} is not a known timezone")
        if self.ranking_cache_ttl_seconds <= 0:
            problems.append("RANKING_CACHE_TTL_SECONDS must be positive")
        if self.http_timeout_seconds <= 0:
            problems.append("HTTP_TIMEOUT_SECONDS must be positive")
        return problems


settings = Settings()
