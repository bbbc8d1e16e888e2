"""
Shared fixtures.

Each test gets its own SQLite file under tmp_path and a clock pinned
to the morning of 2026-01-17.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from habitlog.core.clock import Clock
from habitlog.core.config import Config
from habitlog.core.db import init_db
from habitlog.core.settings import SettingsStore
from habitlog.journal.entries import JournalService
from habitlog.review.report import Reporter
from habitlog.tracking.habits import HabitTracker

TODAY = "2026-01-17"
NOW = datetime(2026, 1, 17, 9, 30)


@pytest.fixture
def config(tmp_path):
    config = Config(
        home_dir=str(tmp_path),
        database_path=str(tmp_path / "habits.db"),
        settings_path=str(tmp_path / "config.json"),
    )
    init_db(config)
    return config


@pytest.fixture
def settings(config):
    return SettingsStore(Path(config.settings_path))


@pytest.fixture
def clock(settings):
    return Clock(settings, now=lambda: NOW)


@pytest.fixture
def tracker(config, clock):
    return HabitTracker(config, clock)


@pytest.fixture
def journal(config, clock):
    return JournalService(config, clock)


@pytest.fixture
def reporter(tracker, journal, clock):
    return Reporter(tracker, journal, clock)
