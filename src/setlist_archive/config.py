"""Configuration settings using pydantic-settings for environment variable loading."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .parser.text import UNKNOWN_LOCATION, UNTITLED_EVENT


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Automatically reads from .env file and environment variables.
    Environment variables take precedence over .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase (only needed by commands that touch the datastore)
    supabase_url: str | None = None
    supabase_key: str | None = None

    # Parser sentinels
    unknown_location: str = UNKNOWN_LOCATION
    untitled_event: str = UNTITLED_EVENT

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
