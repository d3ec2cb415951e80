"""Streak and word-count statistics over a user's entries.

Everything here is keyed on entry dates only; content is read solely for
word counts.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from reflections.domains.journal.schemas import JournalEntryData, JournalStatistics

# Upper bound on how far back the current streak is walked. Streaks longer
# than this are reported as exactly this many days.
DEFAULT_STREAK_LOOKBACK_DAYS = 365

_WORD_SEPARATORS = str.maketrans({"\n": " ", "\r": " "})


def current_streak(
    dates: Iterable[date],
    today: Optional[date] = None,
    cap: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> int:
    """Consecutive days with an entry, counting back from ``today``.

    Today must have an entry for the streak to be non-zero.
    """
    entry_dates = set(dates)
    if not entry_dates:
        return 0
    today = today or date.today()
    streak = 0
    for offset in range(max(cap, 0)):
        if today - timedelta(days=offset) not in entry_dates:
            break
        streak += 1
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    """Longest run of consecutive calendar days anywhere in history."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0
    best = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if previous + timedelta(days=1) == current:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def count_words(text: Optional[str]) -> int:
    """Count tokens separated by spaces, newlines or carriage returns."""
    if not text:
        return 0
    return len([token for token in text.translate(_WORD_SEPARATORS).split(" ") if token])


def total_word_count(entries: Iterable[JournalEntryData]) -> int:
    return sum(count_words(entry.content) for entry in entries)


def compute_statistics(
    entries: Iterable[JournalEntryData],
    today: Optional[date] = None,
    cap: int = DEFAULT_STREAK_LOOKBACK_DAYS,
) -> JournalStatistics:
    entries = list(entries)
    dates = [entry.entry_date for entry in entries if entry.entry_date is not None]
    return JournalStatistics(
        total_entries=len(entries),
        current_streak=current_streak(dates, today=today, cap=cap),
        longest_streak=longest_streak(dates),
    )
