"""
Unit tests for the journal and mood scale.
"""

import time

import pytest

from habitlog.core.errors import InvalidMood
from habitlog.journal.mood import MOOD_EMOJIS, mood_to_emoji, round_mood

from conftest import TODAY


class TestWriteJournal:
    """Test append and replace semantics."""

    def test_first_write_creates_entry_for_today(self, journal):
        entry = journal.write_journal("Great day")

        assert entry.date == TODAY
        assert entry.content == "Great day"
        assert entry.mood is None
        assert entry.updated_at is not None

    def test_writes_append_with_blank_line(self, journal):
        journal.write_journal("A", "2026-01-10")
        entry = journal.write_journal("B", "2026-01-10")

        assert entry.content == "A\n\nB"

    def test_replace_overwrites(self, journal):
        journal.write_journal("A", "2026-01-10")
        journal.write_journal("B", "2026-01-10")

        entry = journal.replace_journal("C", "2026-01-10")
        assert entry.content == "C"

    def test_replace_creates_missing_entry(self, journal):
        entry = journal.replace_journal("Fresh", "2026-01-10")
        assert entry.content == "Fresh"

    def test_replace_with_same_text_refreshes_timestamp(self, journal):
        first = journal.replace_journal("x", "2026-01-10")
        time.sleep(0.01)
        second = journal.replace_journal("x", "2026-01-10")

        assert second.updated_at > first.updated_at

    def test_write_after_mood_only_entry(self, journal):
        journal.set_mood(4, "2026-01-10")

        entry = journal.write_journal("Text", "2026-01-10")
        assert entry.content == "Text"
        assert entry.mood == 4


class TestSetMood:
    """Test mood scoring."""

    def test_mood_overwrites_and_keeps_content(self, journal):
        journal.write_journal("Notes", "2026-01-10")
        journal.set_mood(3, "2026-01-10")
        entry = journal.set_mood(5, "2026-01-10")

        assert entry.mood == 5
        assert entry.content == "Notes"

    def test_mood_creates_entry(self, journal):
        entry = journal.set_mood(2)

        assert entry.date == TODAY
        assert entry.content is None

    def test_same_mood_refreshes_timestamp(self, journal):
        first = journal.set_mood(3, "2026-01-10")
        time.sleep(0.01)
        second = journal.set_mood(3, "2026-01-10")

        assert second.updated_at > first.updated_at

    @pytest.mark.parametrize("mood", [0, 6, -1, True, 3.5])
    def test_invalid_mood_rejected(self, journal, mood):
        with pytest.raises(InvalidMood):
            journal.set_mood(mood, "2026-01-10")

        assert journal.get_entry("2026-01-10") is None


class TestQueries:
    """Test entry lookup, recent, search, and range queries."""

    @pytest.fixture
    def entries(self, journal):
        journal.write_journal("Went running in the park", "2026-01-10")
        journal.write_journal("Quiet day, read a book", "2026-01-11")
        journal.write_journal("Long RUN before work", "2026-01-12")
        journal.write_journal("Saved 100% of the plan_b notes", "2026-01-13")
        return journal

    def test_get_missing_entry(self, journal):
        assert journal.get_entry("2026-01-01") is None

    def test_recent_entries_newest_first(self, entries):
        recent = entries.get_recent_entries(limit=2)
        assert [e.date for e in recent] == ["2026-01-13", "2026-01-12"]

    def test_search_ignores_case(self, entries):
        results = entries.search_journal("run")
        assert [e.date for e in results] == ["2026-01-12", "2026-01-10"]

    def test_search_limit(self, entries):
        assert len(entries.search_journal("run", limit=1)) == 1

    def test_search_wildcards_match_literally(self, entries):
        assert [e.date for e in entries.search_journal("100%")] == ["2026-01-13"]
        assert [e.date for e in entries.search_journal("plan_b")] == ["2026-01-13"]
        assert entries.search_journal("a_b") == []

    def test_search_skips_mood_only_entries(self, entries):
        entries.set_mood(3, "2026-01-14")
        assert all(e.date != "2026-01-14" for e in entries.search_journal(""))

    def test_range_is_inclusive_and_ascending(self, entries):
        results = entries.get_entries_in_range("2026-01-11", "2026-01-13")
        assert [e.date for e in results] == ["2026-01-11", "2026-01-12", "2026-01-13"]


class TestMoodScale:
    """Test mood labels."""

    def test_known_moods(self):
        assert mood_to_emoji(1) == MOOD_EMOJIS[1]
        assert mood_to_emoji(5) == "😄"

    def test_unknown_mood_is_empty(self):
        assert mood_to_emoji(None) == ""
        assert mood_to_emoji(6) == ""
        assert mood_to_emoji(0) == ""

    def test_round_half_up(self):
        assert round_mood(2.5) == 3
        assert round_mood(3.4) == 3
        assert round_mood(4.5) == 5
