"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from shop_finder.adapters.google_geocoding_client import DEFAULT_GEOCODER_URL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    admin_ids: str | None = None
    supabase_url: str
    supabase_service_key: str
    geocoder_api_key: str
    geocoder_base_url: str = DEFAULT_GEOCODER_URL
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_admin_ids(raw: str | None) -> frozenset[int]:
    """Parse the comma-separated admin Telegram user IDs from env."""
    if raw is None:
        return frozenset()
    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit():
            ids.add(int(value))
    return frozenset(ids)
