"""
User settings document.

A small JSON file next to the database. The only recognised option is
``timezone`` (an IANA zone name). Loaded once per process and cached;
``update`` writes through and replaces the cache.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitlog.core.errors import InvalidTimezone

logger = logging.getLogger(__name__)

KNOWN_OPTIONS = ("timezone",)


def load_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone name.

    Raises:
        InvalidTimezone: If the name is empty or unknown
    """
    if not name or not isinstance(name, str):
        raise InvalidTimezone(name)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezone(name) from e


class SettingsStore:
    """Read-through cache over the settings file."""

    def __init__(self, path: Path):
        """
        Initialize settings store.

        Args:
            path: Location of the JSON settings file
        """
        self.path = Path(path)
        self._options: Dict[str, Any] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self) -> Dict[str, Any]:
        """Return current options, reading the file on first use."""
        if not self._loaded:
            self._options = self._read()
            self._loaded = True
        return dict(self._options)

    @property
    def timezone(self) -> Optional[str]:
        return self.get().get("timezone")

    def update(self, **options: Any) -> Dict[str, Any]:
        """
        Persist new option values and refresh the cache.

        Passing ``None`` for an option removes it.

        Raises:
            InvalidTimezone: If ``timezone`` is not a recognised zone name.
                Nothing is written in that case.
        """
        unknown = [key for key in options if key not in KNOWN_OPTIONS]
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        if options.get("timezone") is not None:
            load_timezone(options["timezone"])

        merged = self.get()
        for key, value in options.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(merged, indent=2))
        logger.info(f"Saved settings to {self.path}")

        self._options = merged
        self._loaded = True
        return dict(merged)

    def invalidate(self) -> None:
        """Forget the cached options; next get() re-reads the file."""
        self._options = {}
        self._loaded = False

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.debug(f"No settings file at {self.path}")
            return {}

        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: expected a JSON object")
            return {}

        return data
