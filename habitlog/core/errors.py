"""
Domain errors for habitlog.

Lookups that miss are not errors; they return None or False.
"""


class HabitLogError(Exception):
    """Base class for all habitlog failures."""


class DuplicateName(HabitLogError):
    """A habit with the same name (ignoring case) already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Habit already exists: {name}")


class InvalidMood(HabitLogError, ValueError):
    """Mood score outside the 1-5 scale."""

    def __init__(self, mood):
        self.mood = mood
        super().__init__(f"Mood must be between 1 and 5, got {mood!r}")


class InvalidTimezone(HabitLogError, ValueError):
    """Timezone name is not a known IANA zone."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown timezone: {name!r}")
