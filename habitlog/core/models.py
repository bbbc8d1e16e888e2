"""
Database models for habitlog.

Models: Habit, HabitLog, JournalEntry.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Habit(Base):
    """
    A habit being tracked.

    Never deleted: deactivation hides it from listings.
    Names are unique ignoring case.
    """

    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200, collation="NOCASE"), unique=True, nullable=False)
    emoji: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    frequency: Mapped[str] = mapped_column(String(32), default="daily")  # Label only
    active: Mapped[bool] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "frequency": self.frequency,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<Habit {self.id}: {self.name} active={self.active}>"


class HabitLog(Base):
    """
    One completion of a habit on one calendar day.

    At most one row per (habit, day); logging again replaces the notes.
    """

    __tablename__ = "habit_logs"
    __table_args__ = (
        UniqueConstraint("habit_id", "logged_at", name="uq_habit_logs_habit_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    habit_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("habits.id"), nullable=False
    )
    logged_at: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "logged_at": self.logged_at,
            "notes": self.notes,
        }

    def __repr__(self) -> str:
        return f"<HabitLog {self.id}: habit_id={self.habit_id} {self.logged_at}>"


class JournalEntry(Base):
    """
    Journal text and mood for one calendar day.

    Content is appended to across writes; mood is a single 1-5 score.
    """

    __tablename__ = "journal"
    __table_args__ = (
        CheckConstraint("mood IS NULL OR (mood >= 1 AND mood <= 5)", name="ck_journal_mood_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), unique=True, nullable=False, index=True)  # YYYY-MM-DD
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mood: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "content": self.content,
            "mood": self.mood,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id}: {self.date} mood={self.mood}>"
