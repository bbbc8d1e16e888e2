"""
Mood scale.

Mood is a 1-5 score; each value has a face.
"""

import math
from typing import Dict, Optional

MOOD_MIN = 1
MOOD_MAX = 5

MOOD_EMOJIS: Dict[int, str] = {
    1: "😞",
    2: "😕",
    3: "😐",
    4: "🙂",
    5: "😄",
}


def mood_to_emoji(mood: Optional[int]) -> str:
    """Face for a mood score, or "" for no/unknown mood."""
    if mood is None:
        return ""
    return MOOD_EMOJIS.get(mood, "")


def round_mood(value: float) -> int:
    """Round an average mood to the nearest score (halves round up)."""
    return int(math.floor(value + 0.5))


def is_valid_mood(mood) -> bool:
    return isinstance(mood, int) and not isinstance(mood, bool) and MOOD_MIN <= mood <= MOOD_MAX
