"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    supabase_url: str
    supabase_service_key: str
    supabase_storage_bucket: str = "photo-events"
    frontend_url: str
    cors_allowed_origins: str = "*"
    trust_forwarded_for: bool = False
    conversation_ttl_seconds: int | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str) -> list[str]:
    """Parse a comma separated CORS origin list."""
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
