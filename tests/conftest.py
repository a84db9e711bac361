import logging

import pytest
from typer.testing import CliRunner
from pathlib import Path
from typing import List

from filecache.infrastructure.cache.file_cache_service import FileCacheService
from filecache.infrastructure.config import settings

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced clock returning seconds since the epoch."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def events() -> List[object]:
    """Collects events emitted by the cache service."""
    return []


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache-root"


@pytest.fixture
def cache_service(cache_root: Path, fake_clock: FakeClock, events: List[object]) -> FileCacheService:
    """FileCacheService on a temporary root with a controllable clock."""
    return FileCacheService(cache_root, "test-instance", clock=fake_clock, listener=events.append)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs call setup_logging, which swaps the root handlers for ones bound to the runner's streams."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps tests away from the user's config file, .env and FILECACHE_* variables."""
    monkeypatch.setattr(settings, "_config", {})
    monkeypatch.setattr(settings, "_loaded", True)
    settings.clear_test_config()
    for key in ("cache.root_path", "cache.instance", "cache.default_ttl",
                "logging.level", "logging.file", "logging.format"):
        monkeypatch.delenv(settings.env_var_name(key), raising=False)
    yield
    settings.clear_test_config()
