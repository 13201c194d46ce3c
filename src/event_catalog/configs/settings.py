"""Centralized settings management for the event catalog."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MINUTES_PER_DAY = 24 * 60


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file in the
    working directory.
    """

    # -------------------------------------------------------------------------
    # ENVIRONMENT
    # -------------------------------------------------------------------------
    ENV: str = "development"
    DEBUG: bool = False

    # -------------------------------------------------------------------------
    # FEEDS
    # -------------------------------------------------------------------------
    EVENTS_CSV_URL: str | None = None
    VENUES_CSV_URL: str | None = None
    REQUEST_TIMEOUT: float = Field(default=30, gt=0)
    MAX_RETRIES: int = Field(default=3, ge=0)

    # -------------------------------------------------------------------------
    # INGESTION
    # -------------------------------------------------------------------------
    DEFAULT_TIMEZONE: str = "Europe/Lisbon"
    TIME_BUCKET_MINUTES: int = 30
    DEFAULT_SOURCE_LABEL: str = "events_feed"
    PASS_TIMEOUT_SECONDS: float | None = Field(default=None, gt=0)

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    # BASE_DIR points to the event_catalog package
    BASE_DIR: Path = Path(__file__).resolve().parents[1]
    INGESTION_CONFIG_PATH: Path = BASE_DIR / "configs" / "ingestion.yaml"

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )

    @field_validator("TIME_BUCKET_MINUTES")
    @classmethod
    def validate_bucket(cls, v: int) -> int:
        if v <= 0 or MINUTES_PER_DAY % v != 0:
            raise ValueError("TIME_BUCKET_MINUTES must be a positive divisor of 1440")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("EVENTS_CSV_URL", "VENUES_CSV_URL")
    @classmethod
    def blank_url_is_unset(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
