"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from queuecast.core.logging import setup_logging
from queuecast.core.models import Catalog


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for all tests."""
    setup_logging(level="ERROR")  # Reduce noise during tests


@pytest.fixture
def show_dir(tmp_path):
    """A program directory with three episodes and some non-video files."""
    directory = tmp_path / "media" / "Test Show"
    directory.mkdir(parents=True)
    for name in ("c.mkv", "a.mkv", "b.mkv", "notes.txt", "cover.jpg"):
        (directory / name).write_text(name)
    return directory


@pytest.fixture
def symlink_dir(tmp_path):
    """Directory the tests publish links into (not created up front)."""
    return tmp_path / "broadcast"


@pytest.fixture
def catalog():
    """An empty in-memory catalog."""
    return Catalog()


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """A fake clock starting at 2024-01-01 12:00 UTC."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
