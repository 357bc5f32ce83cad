"""Runtime configuration using pydantic-settings."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``UKGEOTARGET_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UKGEOTARGET_",
        extra="ignore",
    )

    # Reference data
    places_db: Path = Field(
        default=Path("postcode_locations.db"),
        description="SQLite file holding the os_open_names table",
    )
    stats_db: Path | None = Field(
        default=None,
        description="SQLite file holding postcode_district_stats (defaults to places_db)",
    )

    # Connection pool
    pool_size: int = Field(default=5, ge=1, le=64)
    acquire_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a free pooled connection",
    )
    query_timeout: float = Field(
        default=5.0,
        gt=0,
        description="SQLite busy timeout in seconds",
    )

    # Logging
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @property
    def stats_db_path(self) -> Path:
        return self.stats_db if self.stats_db is not None else self.places_db

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]
