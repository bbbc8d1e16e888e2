"""
Habit tracking.

Habits, per-day completion logs, and streaks. Every operation that
targets a habit accepts either its numeric id or its name (any case).
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from habitlog.core.clock import Clock, format_date
from habitlog.core.config import Config
from habitlog.core.db import session_scope
from habitlog.core.errors import DuplicateName
from habitlog.core.models import Habit, HabitLog

logger = logging.getLogger(__name__)

HabitKey = Union[int, str]


class LookupKind(str, Enum):
    """How a habit reference was resolved."""
    BY_ID = "by_id"
    BY_NAME = "by_name"
    NOT_FOUND = "not_found"


@dataclass
class HabitRef:
    """Result of resolving an id-or-name reference."""

    kind: LookupKind
    habit: Optional[Habit] = None

    @property
    def found(self) -> bool:
        return self.kind != LookupKind.NOT_FOUND


@dataclass
class DayLog:
    """A habit paired with whether it was done on a given day."""

    habit: Habit
    logged: bool
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "habit": self.habit.to_dict(),
            "logged": self.logged,
            "notes": self.notes,
        }


@dataclass
class MultiLogResult:
    """Names logged (or not) by a positional batch log."""

    logged: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"logged": self.logged, "failed": self.failed}


def _resolve(session: Session, name_or_id: HabitKey) -> HabitRef:
    """
    Resolve a habit by id, then by case-insensitive name.

    Integers and all-digit strings are tried as ids first.
    """
    if isinstance(name_or_id, bool):
        return HabitRef(LookupKind.NOT_FOUND)

    if isinstance(name_or_id, int) or (isinstance(name_or_id, str) and name_or_id.strip().isdigit()):
        habit = session.get(Habit, int(name_or_id))
        if habit is not None:
            return HabitRef(LookupKind.BY_ID, habit)

    name = str(name_or_id).strip()
    if name:
        # Column collation is NOCASE, so equality ignores case
        habit = session.scalars(select(Habit).where(Habit.name == name)).first()
        if habit is not None:
            return HabitRef(LookupKind.BY_NAME, habit)

    return HabitRef(LookupKind.NOT_FOUND)


class HabitTracker:
    """
    Habit CRUD, logging, and streak calculation.

    Dates default to "today" as resolved by the clock.
    """

    def __init__(self, config: Config, clock: Clock):
        """
        Initialize habit tracker.

        Args:
            config: Application config (database location)
            clock: Calendar-day resolver
        """
        self.config = config
        self.clock = clock

    def add_habit(
        self,
        name: str,
        emoji: Optional[str] = None,
        frequency: str = "daily",
    ) -> Habit:
        """
        Create a new active habit.

        Raises:
            DuplicateName: If a habit with this name already exists
            ValueError: If the name is blank
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Habit name cannot be empty")

        try:
            with session_scope(self.config) as session:
                habit = Habit(
                    name=name,
                    emoji=emoji or None,
                    frequency=frequency or "daily",
                )
                session.add(habit)
                session.flush()
        except IntegrityError as e:
            raise DuplicateName(name) from e

        logger.info(f"Added habit: {habit}")
        return habit

    def list_habits(self, include_inactive: bool = False) -> List[Habit]:
        """List habits in creation order (active only by default)."""
        with session_scope(self.config) as session:
            query = select(Habit)
            if not include_inactive:
                query = query.where(Habit.active == 1)
            query = query.order_by(Habit.created_at, Habit.id)
            return list(session.scalars(query).all())

    def resolve(self, name_or_id: HabitKey) -> HabitRef:
        """Resolve an id-or-name reference to a habit."""
        with session_scope(self.config) as session:
            return _resolve(session, name_or_id)

    def get_habit(self, name_or_id: HabitKey) -> Optional[Habit]:
        """Get habit by id or name. Returns None if not found."""
        return self.resolve(name_or_id).habit

    def log_habit(
        self,
        name_or_id: HabitKey,
        date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Mark a habit done for a day.

        Logging the same day twice replaces the notes.
        Returns False if the habit does not exist.
        """
        log_date = date or self.clock.today()

        with session_scope(self.config) as session:
            ref = _resolve(session, name_or_id)
            if not ref.found:
                logger.debug(f"log: habit not found: {name_or_id!r}")
                return False

            stmt = sqlite_insert(HabitLog).values(
                habit_id=ref.habit.id,
                logged_at=log_date,
                notes=notes or None,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[HabitLog.habit_id, HabitLog.logged_at],
                set_={"notes": stmt.excluded.notes},
            )
            session.execute(stmt)

        logger.info(f"Logged {ref.habit.name} for {log_date}")
        return True

    def unlog_habit(self, name_or_id: HabitKey, date: Optional[str] = None) -> bool:
        """
        Remove a day's log for a habit.

        Removing a log that does not exist still succeeds.
        Returns False only if the habit does not exist.
        """
        log_date = date or self.clock.today()

        with session_scope(self.config) as session:
            ref = _resolve(session, name_or_id)
            if not ref.found:
                return False

            result = session.execute(
                delete(HabitLog).where(
                    HabitLog.habit_id == ref.habit.id,
                    HabitLog.logged_at == log_date,
                )
            )

        logger.info(f"Unlogged {ref.habit.name} for {log_date} ({result.rowcount} row(s))")
        return True

    def get_logs_for_date(self, date: Optional[str] = None) -> List[DayLog]:
        """Every active habit with its done/not-done status for a day."""
        target_date = date or self.clock.today()
        habits = self.list_habits()

        with session_scope(self.config) as session:
            logs = session.scalars(
                select(HabitLog).where(HabitLog.logged_at == target_date)
            ).all()
            by_habit = {log.habit_id: log for log in logs}

        return [
            DayLog(
                habit=habit,
                logged=habit.id in by_habit,
                notes=by_habit[habit.id].notes if habit.id in by_habit else None,
            )
            for habit in habits
        ]

    def log_multiple(self, indices: Iterable[int], date: Optional[str] = None) -> MultiLogResult:
        """
        Log several habits by their 1-based position in list_habits().

        Positions refer to the listing at call time, not to habit ids.
        Positions outside the listing are skipped.
        """
        habits = self.list_habits()
        result = MultiLogResult()

        for idx in indices:
            if 1 <= idx <= len(habits):
                habit = habits[idx - 1]
                if self.log_habit(habit.id, date):
                    result.logged.append(habit.name)
                else:
                    result.failed.append(habit.name)
            else:
                logger.debug(f"Skipping out-of-range habit number {idx}")

        return result

    def get_log_dates(self, name_or_id: HabitKey) -> List[str]:
        """All logged dates for a habit, newest first."""
        with session_scope(self.config) as session:
            ref = _resolve(session, name_or_id)
            if not ref.found:
                return []

            return list(
                session.scalars(
                    select(HabitLog.logged_at)
                    .where(HabitLog.habit_id == ref.habit.id)
                    .order_by(HabitLog.logged_at.desc())
                ).all()
            )

    def get_streak(self, name_or_id: HabitKey) -> int:
        """
        Count consecutive logged days ending today.

        If today is not logged yet the count starts from yesterday, so an
        open day does not break the streak until it is over. The walk stops
        at the first missing day.
        """
        dates = self.get_log_dates(name_or_id)
        if not dates:
            return 0

        today = self.clock.today_date()
        streak = 0
        days_back = 0 if dates[0] == format_date(today) else 1

        for logged_at in dates:
            expected = format_date(today - timedelta(days=days_back))
            if logged_at == expected:
                streak += 1
                days_back += 1
            elif logged_at < expected:
                break

        return streak

    def deactivate_habit(self, name_or_id: HabitKey) -> bool:
        """Hide a habit from listings. Its logs are kept."""
        return self._set_active(name_or_id, False)

    def activate_habit(self, name_or_id: HabitKey) -> bool:
        """Bring a deactivated habit back."""
        return self._set_active(name_or_id, True)

    def update_habit(
        self,
        name_or_id: HabitKey,
        name: Optional[str] = None,
        emoji: Optional[str] = None,
    ) -> bool:
        """
        Rename a habit and/or change its emoji.

        Empty values mean "leave unchanged".

        Raises:
            DuplicateName: If the new name belongs to another habit
        """
        try:
            with session_scope(self.config) as session:
                ref = _resolve(session, name_or_id)
                if not ref.found:
                    return False

                if name and name.strip():
                    ref.habit.name = name.strip()
                if emoji:
                    ref.habit.emoji = emoji
                session.flush()
        except IntegrityError as e:
            raise DuplicateName(name) from e

        logger.info(f"Updated habit {ref.habit.id}")
        return True

    def _set_active(self, name_or_id: HabitKey, active: bool) -> bool:
        with session_scope(self.config) as session:
            ref = _resolve(session, name_or_id)
            if not ref.found:
                return False
            ref.habit.active = 1 if active else 0

        logger.info(f"{'Activated' if active else 'Deactivated'} habit {ref.habit.name}")
        return True
