"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = ""
    api_key: str = ""
    user_id: str = "demo-user"
    timezone: str | None = None
    local_store_dir: str = ".wellness"
    health_check_interval_seconds: float = 30
    health_timeout_seconds: float = 5
    request_timeout_seconds: float = 10
    diagnostics_timeout_seconds: float = 10
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    kv_table: str = "kv_store"
    service_prefix: str = "/wellness"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


def normalize_prefix(raw: str) -> str:
    """Return a route prefix with one leading slash and no trailing slash."""
    cleaned = raw.strip().strip("/")
    if not cleaned:
        return ""
    return f"/{cleaned}"
