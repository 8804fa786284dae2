"""
Configuration — typed settings loaded from the environment.

Uses pydantic-settings so an application embedding deferred-railway can tune
its logging without code changes:

    DEFERRED_RAILWAY_LOG_LEVEL=DEBUG
    DEFERRED_RAILWAY_JSON_LOGS=true
    DEFERRED_RAILWAY_TRACE_STEPS=true

Settings are read once and cached; call get_settings.cache_clear() after
changing the environment (tests do this through a fixture).
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RailwaySettings(BaseSettings):
    """
    Root settings for the package.

    Load order (highest priority first):
      1. Environment variables prefixed with DEFERRED_RAILWAY_
      2. Default values

    No .env file is read. Applications that keep these settings in a .env
    file load it into the environment themselves before the first read.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEFERRED_RAILWAY_",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum level passed to structlog")
    json_logs: bool = Field(default=False, description="Render log lines as JSON instead of console text")
    trace_steps: bool = Field(default=False, description="Emit a debug event for every drained step")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module doesn't know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelNamesMapping().get(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> RailwaySettings:
    """Return the process-wide settings, loading them on first use."""
    return RailwaySettings()
