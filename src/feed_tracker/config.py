"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: str = "data"
    history_key: str = "feedingHistory"
    pending_window_ms: int = Field(default=10 * 60 * 1000, gt=0)
    timezone: str = "UTC"
    default_reminder_hours: int = Field(default=3, ge=0)
    default_reminder_minutes: int = Field(default=0, ge=0, le=59)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="FEED_TRACKER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
