"""
Pytest configuration and fixtures for lscache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from lscache.bucket import Bucket
from lscache.clock import ExpiryClock
from lscache.config import clear_settings_cache
from lscache.service import CacheService, clear_cache_singleton
from lscache.store.memory import MemoryStore

# A fixed starting point: one million minutes after the epoch
START_SECONDS = 60_000_000.0


class FakeTime:
    """Controllable time source for ExpiryClock."""

    def __init__(self, seconds: float = START_SECONDS) -> None:
        self.seconds = seconds

    def __call__(self) -> float:
        return self.seconds

    def advance(self, seconds: float) -> None:
        self.seconds += seconds


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def clock(fake_time: FakeTime) -> ExpiryClock:
    """Minute-resolution clock driven by fake_time."""
    return ExpiryClock(unit_seconds=60, radix=10, time_source=fake_time)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore(quota=1_000_000)


@pytest.fixture
def service(memory_store: MemoryStore, clock: ExpiryClock) -> CacheService:
    """CacheService over a roomy in-memory store."""
    return CacheService(memory_store, clock=clock)


@pytest.fixture
def root(service: CacheService) -> Bucket:
    return service.root()


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide LSCACHE_* environment variables for testing."""
    env_vars = {
        "LSCACHE_STORE_BACKEND": "sqlite",
        "LSCACHE_STORE_PATH": str(temp_dir / "store" / "cache.db"),
        "LSCACHE_STORE_QUOTA": "100000",
        "LSCACHE_EXPIRY_UNIT_SECONDS": "60",
        "LSCACHE_EXPIRY_RADIX": "10",
        "LSCACHE_EVICTION_MARGIN": "100",
        "LSCACHE_WARNINGS_ENABLED": "false",
        "LSCACHE_LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Automatically reset cached settings and service around each test."""
    clear_settings_cache()
    clear_cache_singleton()
    yield
    clear_settings_cache()
    clear_cache_singleton()
