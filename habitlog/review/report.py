"""
Day, week, and month reports.

Pure composition of habit logs and journal entries over calendar days.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from habitlog.core.clock import Clock
from habitlog.core.models import Habit, JournalEntry
from habitlog.journal.entries import JournalService
from habitlog.journal.mood import mood_to_emoji, round_mood
from habitlog.tracking.habits import DayLog, HabitKey, HabitTracker

logger = logging.getLogger(__name__)


@dataclass
class MoodAverage:
    """Mean mood over the days that have one."""

    value: float
    count: int

    @property
    def display(self) -> str:
        return f"{self.value:.1f}"

    @property
    def emoji(self) -> str:
        return mood_to_emoji(round_mood(self.value))

    def to_dict(self) -> dict:
        return {
            "value": round(self.value, 1),
            "count": self.count,
            "emoji": self.emoji,
        }


@dataclass
class DaySummary:
    """Everything recorded for one day."""

    date: str
    habits: List[DayLog]
    entry: Optional[JournalEntry] = None

    @property
    def mood(self) -> Optional[int]:
        return self.entry.mood if self.entry else None

    @property
    def mood_emoji(self) -> str:
        return mood_to_emoji(self.mood)

    @property
    def content(self) -> Optional[str]:
        return self.entry.content if self.entry else None

    @property
    def done_count(self) -> int:
        return sum(1 for log in self.habits if log.logged)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "habits": [
                {
                    "num": i + 1,
                    "name": log.habit.name,
                    "emoji": log.habit.emoji,
                    "logged": log.logged,
                    "notes": log.notes,
                }
                for i, log in enumerate(self.habits)
            ],
            "mood": self.mood,
            "moodEmoji": self.mood_emoji,
            "journal": self.content,
        }


@dataclass
class PeriodSummary:
    """A contiguous run of days, oldest first."""

    days: List[DaySummary]
    habits: List[Habit] = field(default_factory=list)
    year: Optional[int] = None
    month: Optional[int] = None

    @property
    def start(self) -> Optional[str]:
        return self.days[0].date if self.days else None

    @property
    def end(self) -> Optional[str]:
        return self.days[-1].date if self.days else None

    @property
    def mood_average(self) -> Optional[MoodAverage]:
        moods = [day.mood for day in self.days if day.mood is not None]
        if not moods:
            return None
        return MoodAverage(value=sum(moods) / len(moods), count=len(moods))

    def to_dict(self) -> dict:
        average = self.mood_average
        data = {
            "start": self.start,
            "end": self.end,
            "days": [day.to_dict() for day in self.days],
            "moodAverage": average.to_dict() if average else None,
        }
        if self.year is not None:
            data["year"] = self.year
            data["month"] = self.month
        return data


@dataclass
class StreakSummary:
    """A habit's current streak and its recent day-by-day record."""

    habit: Habit
    current_streak: int
    days: List[Tuple[str, bool]]

    def to_dict(self) -> dict:
        return {
            "habit": self.habit.name,
            "emoji": self.habit.emoji,
            "currentStreak": self.current_streak,
            "days": [{"date": d, "logged": logged} for d, logged in self.days],
        }


def parse_mmyy(text: str) -> Tuple[int, int]:
    """
    Parse a month given as MMYY (e.g. 0226 = February 2026).

    Raises:
        ValueError: If the text is not four digits naming a real month
    """
    text = (text or "").strip()
    if len(text) != 4 or not text.isdigit():
        raise ValueError("Format: mmyy (e.g., 0226 for Feb 2026)")

    month = int(text[:2])
    year = 2000 + int(text[2:])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in {text!r}")

    return year, month


class Reporter:
    """Builds day and period summaries from the tracker and the journal."""

    def __init__(self, tracker: HabitTracker, journal: JournalService, clock: Clock):
        self.tracker = tracker
        self.journal = journal
        self.clock = clock

    def day(self, date: Optional[str] = None) -> DaySummary:
        """Habits and journal for one day (default today)."""
        target_date = date or self.clock.today()
        return DaySummary(
            date=target_date,
            habits=self.tracker.get_logs_for_date(target_date),
            entry=self.journal.get_entry(target_date),
        )

    def period(self, dates: List[str]) -> PeriodSummary:
        """Summaries for the given dates, in the order given."""
        return PeriodSummary(
            days=[self.day(d) for d in dates],
            habits=self.tracker.list_habits(),
        )

    def days(self, num_days: int) -> PeriodSummary:
        """The last num_days days, ending today."""
        return self.period(self.clock.last_days(num_days))

    def week(self) -> PeriodSummary:
        return self.days(7)

    def month(self, year: Optional[int] = None, month: Optional[int] = None) -> PeriodSummary:
        """A whole calendar month (default: the current one)."""
        if year is None or month is None:
            today = self.clock.today_date()
            year, month = today.year, today.month

        summary = self.period(self.clock.month_dates(year, month))
        summary.year = year
        summary.month = month
        return summary

    def mood_history(self, num_days: int = 7) -> PeriodSummary:
        return self.days(num_days)

    def streaks(self, name_or_id: Optional[HabitKey] = None, num_days: int = 7) -> List[StreakSummary]:
        """
        Current streak plus a logged/not-logged strip for each habit.

        With a habit given, only that habit; an unknown habit gives [].
        """
        if name_or_id is not None:
            habit = self.tracker.get_habit(name_or_id)
            habits = [habit] if habit else []
        else:
            habits = self.tracker.list_habits()

        window = self.clock.last_days(num_days)
        results = []

        for habit in habits:
            logged_dates = set(self.tracker.get_log_dates(habit.id))
            results.append(
                StreakSummary(
                    habit=habit,
                    current_streak=self.tracker.get_streak(habit.id),
                    days=[(d, d in logged_dates) for d in window],
                )
            )

        logger.debug(f"Built {len(results)} streak summaries over {num_days} days")
        return results
