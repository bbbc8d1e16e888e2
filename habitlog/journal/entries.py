"""
Daily journal.

One entry per calendar day holding free text and a mood score.
Writing adds to the day's text; replacing overwrites it.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Text, func, select
from sqlalchemy.orm import Session

from habitlog.core.clock import Clock
from habitlog.core.config import Config
from habitlog.core.db import session_scope
from habitlog.core.errors import InvalidMood
from habitlog.core.models import JournalEntry
from habitlog.journal.mood import is_valid_mood

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = "\n\n"


def _get_or_create(session: Session, target_date: str) -> JournalEntry:
    entry = session.scalars(
        select(JournalEntry).where(JournalEntry.date == target_date)
    ).first()
    if entry is None:
        entry = JournalEntry(date=target_date)
        session.add(entry)
    return entry


class JournalService:
    """Journal entries and mood, keyed by calendar day."""

    def __init__(self, config: Config, clock: Clock):
        self.config = config
        self.clock = clock

    def get_entry(self, date: Optional[str] = None) -> Optional[JournalEntry]:
        """Entry for a day (default today), or None."""
        target_date = date or self.clock.today()

        with session_scope(self.config) as session:
            return session.scalars(
                select(JournalEntry).where(JournalEntry.date == target_date)
            ).first()

    def write_journal(self, content: str, date: Optional[str] = None) -> JournalEntry:
        """
        Add text to a day's entry.

        Existing text is kept; the new text follows after a blank line.
        """
        target_date = date or self.clock.today()

        with session_scope(self.config) as session:
            entry = _get_or_create(session, target_date)
            if entry.content:
                entry.content = f"{entry.content}{ENTRY_SEPARATOR}{content}"
            else:
                entry.content = content
            entry.updated_at = datetime.utcnow()
            session.flush()

        logger.info(f"Journal updated for {target_date}")
        return self.get_entry(target_date)

    def replace_journal(self, content: str, date: Optional[str] = None) -> JournalEntry:
        """Overwrite a day's text."""
        target_date = date or self.clock.today()

        with session_scope(self.config) as session:
            entry = _get_or_create(session, target_date)
            entry.content = content
            entry.updated_at = datetime.utcnow()
            session.flush()

        logger.info(f"Journal replaced for {target_date}")
        return self.get_entry(target_date)

    def set_mood(self, mood: int, date: Optional[str] = None) -> JournalEntry:
        """
        Set a day's mood, replacing any earlier score.

        Raises:
            InvalidMood: If mood is not an integer from 1 to 5
        """
        if not is_valid_mood(mood):
            raise InvalidMood(mood)

        target_date = date or self.clock.today()

        with session_scope(self.config) as session:
            entry = _get_or_create(session, target_date)
            entry.mood = mood
            entry.updated_at = datetime.utcnow()
            session.flush()

        logger.info(f"Mood set to {mood} for {target_date}")
        return self.get_entry(target_date)

    def get_recent_entries(self, limit: int = 7) -> List[JournalEntry]:
        """Most recent entries, newest first."""
        with session_scope(self.config) as session:
            return list(
                session.scalars(
                    select(JournalEntry)
                    .order_by(JournalEntry.date.desc())
                    .limit(limit)
                ).all()
            )

    def search_journal(self, query: str, limit: int = 10) -> List[JournalEntry]:
        """
        Entries whose text contains query, ignoring case. Newest first.

        Wildcard characters in the query match literally.
        """
        with session_scope(self.config) as session:
            return list(
                session.scalars(
                    select(JournalEntry)
                    .where(func.lower(JournalEntry.content, type_=Text).contains(query.lower(), autoescape=True))
                    .order_by(JournalEntry.date.desc())
                    .limit(limit)
                ).all()
            )

    def get_entries_in_range(self, start_date: str, end_date: str) -> List[JournalEntry]:
        """Entries from start_date to end_date inclusive, oldest first."""
        with session_scope(self.config) as session:
            return list(
                session.scalars(
                    select(JournalEntry)
                    .where(JournalEntry.date >= start_date, JournalEntry.date <= end_date)
                    .order_by(JournalEntry.date)
                ).all()
            )
