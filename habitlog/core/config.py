"""
Configuration management for habitlog.

Resolves where data lives from environment variables (optionally loaded
from a .env file by the CLI).
"""

import os
from dataclasses import dataclass
from pathlib import Path

MEMORY_DATABASE = ":memory:"


@dataclass
class Config:
    """Application configuration."""

    # Data directory
    home_dir: str = str(Path.home() / ".habits")

    # Database
    database_path: str = str(Path.home() / ".habits" / "habits.db")

    # User settings document (timezone)
    settings_path: str = str(Path.home() / ".habits" / "config.json")

    @property
    def is_memory(self) -> bool:
        """True when running against a throwaway in-memory database."""
        return self.database_path == MEMORY_DATABASE

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        home = Path(os.getenv("HABITS_HOME", str(Path.home() / ".habits"))).expanduser()

        if os.getenv("HABITS_TEST"):
            database_path = MEMORY_DATABASE
        else:
            database_path = os.getenv("HABITS_DB_PATH", str(home / "habits.db"))

        return cls(
            home_dir=str(home),
            database_path=database_path,
            settings_path=os.getenv("HABITS_SETTINGS_PATH", str(home / "config.json")),
        )

    def ensure_home(self) -> Path:
        """Create the data directory if missing."""
        home = Path(self.home_dir)
        home.mkdir(parents=True, exist_ok=True)
        return home
