"""Statistics engine tests: streaks over sparse date sets and word counts."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from reflections.domains.journal.schemas import JournalEntryData
from reflections.domains.journal.services import stats_service

pytestmark = pytest.mark.unit

TODAY = date(2026, 3, 15)


def _days(*offsets):
    return [TODAY - timedelta(days=offset) for offset in offsets]


def _entries(*offsets, content="one two"):
    return [JournalEntryData(content=content, entry_date=day) for day in _days(*offsets)]


# ==================== Current Streak ====================


def test_current_streak_empty():
    assert stats_service.current_streak([], today=TODAY) == 0


def test_current_streak_single_entry_today():
    assert stats_service.current_streak(_days(0), today=TODAY) == 1


def test_current_streak_requires_today():
    assert stats_service.current_streak(_days(1), today=TODAY) == 0


def test_current_streak_stops_at_first_gap():
    assert stats_service.current_streak(_days(0, 1, 2, 5), today=TODAY) == 3


def test_current_streak_ignores_duplicates():
    assert stats_service.current_streak(_days(0, 0, 1, 1), today=TODAY) == 2


def test_current_streak_is_capped():
    dates = _days(*range(20))
    assert stats_service.current_streak(dates, today=TODAY, cap=7) == 7
    assert stats_service.current_streak(dates, today=TODAY) == 20


# ==================== Longest Streak ====================


def test_longest_streak_empty_and_single():
    assert stats_service.longest_streak([]) == 0
    assert stats_service.longest_streak(_days(40)) == 1


def test_longest_streak_anywhere_in_history():
    assert stats_service.longest_streak(_days(0, 10, 11, 12, 13, 20, 21)) == 4


def test_longest_streak_collapses_duplicate_dates():
    assert stats_service.longest_streak(_days(3, 3, 4, 4, 5)) == 3


def test_longest_streak_unsorted_input():
    assert stats_service.longest_streak(_days(5, 0, 4, 1, 3)) == 3


def test_longest_streak_across_month_boundary():
    dates = [date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1), date(2026, 2, 2)]
    assert stats_service.longest_streak(dates) == 4


# ==================== Aggregates ====================


def test_compute_statistics_empty():
    stats = stats_service.compute_statistics([], today=TODAY)
    assert stats.model_dump() == {"total_entries": 0, "current_streak": 0, "longest_streak": 0}


def test_compute_statistics_mixed_history():
    stats = stats_service.compute_statistics(_entries(0, 1, 2, 5), today=TODAY)
    assert stats.total_entries == 4
    assert stats.current_streak == 3
    assert stats.longest_streak == 3


def test_longest_never_below_current():
    for offsets in [(0,), (0, 1), (0, 2, 3, 4), (1, 2, 3), (0, 1, 2, 3, 9)]:
        stats = stats_service.compute_statistics(_entries(*offsets), today=TODAY)
        assert stats.longest_streak >= stats.current_streak


@pytest.mark.parametrize(
    "text,expected",
    [
        (None, 0),
        ("", 0),
        ("   ", 0),
        ("one", 1),
        ("one two  three", 3),
        ("line one\nline two\r\nend", 5),
    ],
)
def test_count_words(text, expected):
    assert stats_service.count_words(text) == expected


def test_total_word_count_sums_entries():
    entries = _entries(0, 1, content="a b c")
    assert stats_service.total_word_count(entries) == 6
