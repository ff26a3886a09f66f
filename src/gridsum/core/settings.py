"""Environment-driven settings for gridsum.

Settings only cover the ambient concerns (logging level, output format,
service name); the summation itself has no tunables.

Examples:
    >>> from gridsum.core.settings import GridSumSettings
    >>> GridSumSettings(log_level="DEBUG").log_level
    'DEBUG'

Environment variables use the ``GRIDSUM_`` prefix (``GRIDSUM_LOG_LEVEL``,
``GRIDSUM_LOG_JSON``, ``GRIDSUM_SERVICE_NAME``) and may live in a ``.env``
file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gridsum.core.logging import configure_logging

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class GridSumSettings(BaseSettings):
    """Settings for gridsum.

    Fields
    ──────
    log_level     : structlog / stdlib log level
    log_json      : True for JSON logs, False for console, None to auto-detect
    service_name  : ``service`` field attached to every log event
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDSUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = Field(default="gridsum", min_length=1)

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> GridSumSettings:
    """Return the process-wide settings, read once from the environment."""
    return GridSumSettings()


def configure_from_settings(settings: GridSumSettings | None = None) -> GridSumSettings:
    """Apply *settings* (or the cached environment settings) to logging."""
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service_name,
    )
    return settings


__all__ = ["GridSumSettings", "get_settings", "configure_from_settings"]
