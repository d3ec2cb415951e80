"""Mood catalogue: the fixed set of primary moods and their groupings."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional


class Mood(str, Enum):
    # Positive
    HAPPY = "Happy"
    EXCITED = "Excited"
    RELAXED = "Relaxed"
    GRATEFUL = "Grateful"
    CONFIDENT = "Confident"
    # Neutral
    CALM = "Calm"
    THOUGHTFUL = "Thoughtful"
    CURIOUS = "Curious"
    NOSTALGIC = "Nostalgic"
    BORED = "Bored"
    # Negative
    SAD = "Sad"
    ANGRY = "Angry"
    STRESSED = "Stressed"
    LONELY = "Lonely"
    ANXIOUS = "Anxious"

    @property
    def code(self) -> int:
        """Stable 1-based numeric code (Happy=1 ... Anxious=15)."""
        return list(Mood).index(self) + 1

    @property
    def category(self) -> str:
        return mood_category(self)

    @classmethod
    def parse(cls, value: object) -> Optional["Mood"]:
        """Resolve a mood from its name, value or numeric code; None if unknown."""
        if isinstance(value, Mood):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            members = list(cls)
            return members[value - 1] if 1 <= value <= len(members) else None
        text = str(value or "").strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        return None


POSITIVE = "Positive"
NEUTRAL = "Neutral"
NEGATIVE = "Negative"
UNKNOWN = "Unknown"

MOODS_BY_CATEGORY: Dict[str, List[Mood]] = {
    POSITIVE: [Mood.HAPPY, Mood.EXCITED, Mood.RELAXED, Mood.GRATEFUL, Mood.CONFIDENT],
    NEUTRAL: [Mood.CALM, Mood.THOUGHTFUL, Mood.CURIOUS, Mood.NOSTALGIC, Mood.BORED],
    NEGATIVE: [Mood.SAD, Mood.ANGRY, Mood.STRESSED, Mood.LONELY, Mood.ANXIOUS],
}

CATEGORY_COLORS = {
    POSITIVE: "#4caf50",
    NEUTRAL: "#2196f3",
    NEGATIVE: "#f44336",
}
DEFAULT_CATEGORY_COLOR = "#9e9e9e"


def moods_by_category() -> Dict[str, List[str]]:
    return {category: [m.value for m in moods] for category, moods in MOODS_BY_CATEGORY.items()}


def all_moods() -> List[str]:
    return [m.value for m in Mood]


def mood_category(mood: object) -> str:
    parsed = Mood.parse(mood)
    if parsed is None:
        return UNKNOWN
    for category, moods in MOODS_BY_CATEGORY.items():
        if parsed in moods:
            return category
    return UNKNOWN


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)
