"""
Unit tests for calendar-day resolution.
"""

from datetime import datetime, timezone

import pytest

from habitlog.core.clock import Clock, parse_date
from habitlog.core.errors import InvalidTimezone


class TestResolveDate:
    """Test today / N days ago."""

    def test_today_and_offsets(self, clock):
        assert clock.today() == "2026-01-17"
        assert clock.resolve_date(0) == "2026-01-17"
        assert clock.resolve_date(1) == "2026-01-16"
        assert clock.resolve_date(17) == "2025-12-31"

    def test_crosses_leap_day(self, settings):
        clock = Clock(settings, now=lambda: datetime(2028, 3, 1, 8, 0))
        assert clock.resolve_date(1) == "2028-02-29"

    def test_configured_timezone(self, settings):
        """03:00 UTC is still the previous evening in Los Angeles."""
        settings.update(timezone="America/Los_Angeles")
        clock = Clock(settings, now=lambda: datetime(2026, 1, 17, 3, 0, tzinfo=timezone.utc))

        assert clock.today() == "2026-01-16"
        assert clock.resolve_date(1) == "2026-01-15"

    def test_timezone_ahead_of_utc(self, settings):
        settings.update(timezone="Asia/Tokyo")
        clock = Clock(settings, now=lambda: datetime(2026, 1, 16, 20, 0, tzinfo=timezone.utc))

        assert clock.today() == "2026-01-17"

    def test_no_timezone_uses_local_wall_clock(self, settings):
        clock = Clock(settings, now=lambda: datetime(2026, 1, 17, 23, 59))
        assert clock.today() == "2026-01-17"

    def test_real_clock_format(self, settings):
        today = Clock(settings).today()
        assert len(today) == 10
        assert datetime.strptime(today, "%Y-%m-%d")

    def test_invalid_timezone_in_file_fails_loudly(self, settings):
        settings.path.write_text('{"timezone": "Mars/Olympus_Mons"}')
        clock = Clock(settings, now=lambda: datetime(2026, 1, 17, 9, 0))

        with pytest.raises(InvalidTimezone):
            clock.today()


class TestRanges:
    """Test date lists."""

    def test_last_days_oldest_first(self, clock):
        assert clock.last_days(3) == ["2026-01-15", "2026-01-16", "2026-01-17"]

    def test_date_range_inclusive(self, clock):
        assert clock.date_range("2025-12-30", "2026-01-02") == [
            "2025-12-30",
            "2025-12-31",
            "2026-01-01",
            "2026-01-02",
        ]

    def test_month_dates(self, clock):
        february = clock.month_dates(2028, 2)
        assert len(february) == 29
        assert february[0] == "2028-02-01"
        assert february[-1] == "2028-02-29"


class TestParseDate:
    """Test user date validation."""

    def test_valid(self):
        assert parse_date(" 2026-01-05 ") == "2026-01-05"

    @pytest.mark.parametrize("value", ["2026-13-01", "2026-02-30", "yesterday", "", "20260105"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_date(value)
