"""
Unit tests for the settings document and environment config.
"""

import json

import pytest

from habitlog.core.config import MEMORY_DATABASE, Config
from habitlog.core.errors import InvalidTimezone
from habitlog.core.settings import SettingsStore


class TestSettingsStore:
    """Test load-once caching and validated writes."""

    def test_missing_file_means_no_options(self, tmp_path):
        store = SettingsStore(tmp_path / "config.json")

        assert store.get() == {}
        assert store.timezone is None
        assert store.loaded

    def test_malformed_file_means_no_options(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        assert SettingsStore(path).get() == {}

    def test_non_object_file_means_no_options(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('["America/Toronto"]')

        assert SettingsStore(path).get() == {}

    def test_update_persists_and_caches(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        store = SettingsStore(path)

        store.update(timezone="America/Toronto")

        assert store.timezone == "America/Toronto"
        assert json.loads(path.read_text()) == {"timezone": "America/Toronto"}

    def test_invalid_timezone_rejected_before_write(self, tmp_path):
        path = tmp_path / "config.json"
        store = SettingsStore(path)

        with pytest.raises(InvalidTimezone):
            store.update(timezone="Not/AZone")

        assert not path.exists()
        assert store.timezone is None

    def test_invalid_timezone_keeps_previous_value(self, tmp_path):
        store = SettingsStore(tmp_path / "config.json")
        store.update(timezone="Europe/Paris")

        with pytest.raises(InvalidTimezone):
            store.update(timezone="")

        assert store.timezone == "Europe/Paris"

    def test_cache_not_refreshed_until_invalidated(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"timezone": "Europe/Paris"}')
        store = SettingsStore(path)
        assert store.timezone == "Europe/Paris"

        path.write_text('{"timezone": "Asia/Tokyo"}')
        assert store.timezone == "Europe/Paris"

        store.invalidate()
        assert store.timezone == "Asia/Tokyo"

    def test_none_removes_option(self, tmp_path):
        store = SettingsStore(tmp_path / "config.json")
        store.update(timezone="Europe/Paris")

        store.update(timezone=None)

        assert store.timezone is None
        assert json.loads(store.path.read_text()) == {}

    def test_unknown_option_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            SettingsStore(tmp_path / "config.json").update(theme="dark")


class TestConfigFromEnv:
    """Test environment-driven paths."""

    def test_defaults_under_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HABITS_TEST", raising=False)
        monkeypatch.delenv("HABITS_DB_PATH", raising=False)
        monkeypatch.delenv("HABITS_SETTINGS_PATH", raising=False)
        monkeypatch.setenv("HABITS_HOME", str(tmp_path))

        config = Config.from_env()

        assert config.database_path == str(tmp_path / "habits.db")
        assert config.settings_path == str(tmp_path / "config.json")
        assert not config.is_memory

    def test_test_mode_uses_memory(self, monkeypatch):
        monkeypatch.setenv("HABITS_TEST", "1")

        config = Config.from_env()

        assert config.database_path == MEMORY_DATABASE
        assert config.is_memory

    def test_explicit_database_path(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HABITS_TEST", raising=False)
        monkeypatch.setenv("HABITS_DB_PATH", str(tmp_path / "other.db"))

        assert Config.from_env().database_path == str(tmp_path / "other.db")
