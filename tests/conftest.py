import logging

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock

from docketcache.domain.interfaces.user_interface import UserInterface
from docketcache.infrastructure.cache.caching_service import CachingServiceImpl
from docketcache.infrastructure.config import settings
import docketcache.main as main_module


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def cache(clock):
    """A fresh cache per test, driven by the fake clock."""
    return CachingServiceImpl(clock=clock)

@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the user's config files and resets module state."""
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    monkeypatch.setattr(settings, "_loaded", False)
    monkeypatch.setattr(settings, "_config", {})
    monkeypatch.chdir(tmp_path)
    settings.clear_test_config()
    main_module.reset_dependencies()
    # setup_logging() installs root handlers; restore the previous set afterwards
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
    settings.clear_test_config()
    main_module.reset_dependencies()
