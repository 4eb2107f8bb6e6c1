"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from lscache.config import Settings, clear_settings_cache, get_settings


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.STORE_BACKEND == "sqlite"
        assert settings.STORE_PATH == Path(mock_env_vars["LSCACHE_STORE_PATH"])
        assert settings.STORE_QUOTA == 100000
        assert settings.EXPIRY_UNIT_SECONDS == 60
        assert settings.WARNINGS_ENABLED is False
        assert settings.LOG_LEVEL == "DEBUG"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("LSCACHE_EXPIRY_RADIX", "37"),
            ("LSCACHE_EXPIRY_RADIX", "1"),
            ("LSCACHE_STORE_QUOTA", "0"),
            ("LSCACHE_EXPIRY_UNIT_SECONDS", "-5"),
            ("LSCACHE_STORE_BACKEND", "redis"),
        ],
    )
    def test_invalid_values_rejected(self, name: str, value: str) -> None:
        with patch.dict(os.environ, {name: value}, clear=False):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_store_path_cannot_be_directory(self, temp_dir: Path) -> None:
        with patch.dict(os.environ, {"LSCACHE_STORE_PATH": str(temp_dir)}, clear=False):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

        assert "directory" in str(exc_info.value)


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.STORE_BACKEND == "sqlite"
        assert settings.STORE_QUOTA == 5 * 1024 * 1024
        assert settings.EXPIRY_UNIT_SECONDS == 60
        assert settings.EXPIRY_RADIX == 10
        assert settings.EVICTION_MARGIN == 100
        assert settings.WARNINGS_ENABLED is False
        assert settings.LOG_FILE is None


class TestSettingsCache:
    """Tests for the settings singleton."""

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        with patch.dict(os.environ, {"LSCACHE_EVICTION_MARGIN": "5"}):
            clear_settings_cache()
            second = get_settings()

        assert first is not second
        assert second.EVICTION_MARGIN == 5

    def test_redacted_display(self, mock_env_vars: dict[str, str]) -> None:
        display = get_settings().redacted_display()
        assert display["STORE_PATH"] == mock_env_vars["LSCACHE_STORE_PATH"]
        assert display["LOG_FILE"] is None
