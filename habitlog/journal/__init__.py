"""
Journal module for habitlog.

Handles daily entries and the mood scale.
"""

from habitlog.journal.entries import JournalService
from habitlog.journal.mood import MOOD_EMOJIS, mood_to_emoji, round_mood

__all__ = ["JournalService", "MOOD_EMOJIS", "mood_to_emoji", "round_mood"]
