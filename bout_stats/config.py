"""Configuration for bout statistics reconstruction."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_ENVIRONMENTS = {"development", "staging", "production"}


class Settings(BaseSettings):
    """Environment-driven settings with defaults matching the scoring remote."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="allow",
    )

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str | None = Field(default=None, alias="LOG_LEVEL")

    # Nearest-boundary window for events that fall between periods
    period_boundary_tolerance_seconds: float = Field(
        default=5.0,
        ge=0,
        alias="PERIOD_BOUNDARY_TOLERANCE_SECONDS",
    )
    default_period_number: int = Field(default=1, ge=1, alias="DEFAULT_PERIOD_NUMBER")
    latest_reset_segment_only: bool = Field(default=True, alias="LATEST_RESET_SEGMENT_ONLY")
    emit_diagnostics: bool = Field(default=True, alias="EMIT_DIAGNOSTICS")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ALLOWED_ENVIRONMENTS:
            allowed = ", ".join(sorted(ALLOWED_ENVIRONMENTS))
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}.")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"LOG_LEVEL {value!r} is not a logging level name.")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
