"""
Calendar-day resolution.

All habitlog dates are ISO ``YYYY-MM-DD`` strings in the user's own
calendar: the configured timezone if one is set, otherwise the host's
local time. Never UTC.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from habitlog.core.settings import SettingsStore, load_timezone

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()


def parse_date(value: str) -> str:
    """
    Validate a user-supplied calendar date.

    Returns the canonical YYYY-MM-DD string.

    Raises:
        ValueError: If the value is not a real YYYY-MM-DD date
    """
    try:
        parsed = datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return format_date(parsed)


class Clock:
    """
    Resolves "today" and "N days ago" for the configured timezone.

    The optional ``now`` callable replaces the wall clock (tests pin it).
    A naive result is taken as already being local time.
    """

    def __init__(
        self,
        settings: SettingsStore,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self._now = now

    def zone(self) -> Optional[ZoneInfo]:
        """Configured zone, or None for host local time."""
        name = self.settings.timezone
        if name is None:
            return None
        return load_timezone(name)

    def now(self) -> datetime:
        tz = self.zone()

        if self._now is not None:
            current = self._now()
        else:
            # Naive local time when no zone is configured
            current = datetime.now(tz)

        if tz is not None and current.tzinfo is not None:
            current = current.astimezone(tz)

        return current

    def today_date(self) -> date:
        return self.now().date()

    def today(self) -> str:
        return self.resolve_date(0)

    def resolve_date(self, offset_days: int = 0) -> str:
        """
        Calendar date ``offset_days`` before today.

        0 is today, positive values walk into the past one calendar day
        at a time.
        """
        return format_date(self.today_date() - timedelta(days=offset_days))

    def date_range(self, start: str, end: str) -> List[str]:
        """Inclusive ascending list of dates from start to end."""
        first = datetime.strptime(start, DATE_FORMAT).date()
        last = datetime.strptime(end, DATE_FORMAT).date()

        days = []
        current = first
        while current <= last:
            days.append(format_date(current))
            current += timedelta(days=1)
        return days

    def last_days(self, num_days: int) -> List[str]:
        """The num_days dates ending today, oldest first."""
        today = self.today_date()
        return [format_date(today - timedelta(days=offset)) for offset in range(num_days - 1, -1, -1)]

    def month_dates(self, year: int, month: int) -> List[str]:
        """Every date in a calendar month."""
        last_day = calendar.monthrange(year, month)[1]
        return [format_date(date(year, month, day)) for day in range(1, last_day + 1)]
