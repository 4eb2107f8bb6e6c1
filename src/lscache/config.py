"""
Configuration management using pydantic-settings.

Loads configuration from LSCACHE_* environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        LSCACHE_STORE_BACKEND: "memory" or "sqlite"
        LSCACHE_STORE_PATH: SQLite file used by the sqlite backend
        LSCACHE_STORE_QUOTA: Store capacity in characters (keys + values)
        LSCACHE_EXPIRY_UNIT_SECONDS: Resolution of expiry stamps
        LSCACHE_EXPIRY_RADIX: Radix of stored expiry stamps
        LSCACHE_EVICTION_MARGIN: Padding added to every eviction shortfall
        LSCACHE_WARNINGS_ENABLED: Emit warnings on eviction and store errors
        LSCACHE_LOG_LEVEL: Logging level
        LSCACHE_LOG_FILE: Optional JSON-lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="LSCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backing store
    STORE_BACKEND: Literal["memory", "sqlite"] = Field(
        default="sqlite", description="Backing store implementation"
    )
    STORE_PATH: Path = Field(
        default=Path(".cache/lscache.db"), description="SQLite store file"
    )
    STORE_QUOTA: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Store capacity in characters of key + value",
    )

    # Expiry
    EXPIRY_UNIT_SECONDS: int = Field(
        default=60, gt=0, description="Expiry stamp resolution in seconds"
    )
    EXPIRY_RADIX: int = Field(
        default=10, ge=2, le=36, description="Radix of stored expiry stamps"
    )

    # Eviction
    EVICTION_MARGIN: int = Field(
        default=100, ge=0, description="Padding added to each eviction shortfall"
    )
    WARNINGS_ENABLED: bool = Field(
        default=False, description="Emit warnings on eviction and store errors"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON-lines log file")

    @field_validator("STORE_PATH")
    @classmethod
    def validate_store_path(cls, v: Path) -> Path:
        """Reject paths that point at an existing directory."""
        if v.is_dir():
            raise ValueError("STORE_PATH must be a file path, not a directory")
        return v

    def ensure_directories(self) -> None:
        """Create the parent directory of the SQLite store if needed."""
        if self.STORE_BACKEND == "sqlite":
            self.STORE_PATH.parent.mkdir(parents=True, exist_ok=True)

    def redacted_display(self) -> dict[str, str | int | bool | None]:
        """Return settings for display."""
        return {
            "STORE_BACKEND": self.STORE_BACKEND,
            "STORE_PATH": str(self.STORE_PATH),
            "STORE_QUOTA": self.STORE_QUOTA,
            "EXPIRY_UNIT_SECONDS": self.EXPIRY_UNIT_SECONDS,
            "EXPIRY_RADIX": self.EXPIRY_RADIX,
            "EVICTION_MARGIN": self.EVICTION_MARGIN,
            "WARNINGS_ENABLED": self.WARNINGS_ENABLED,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
