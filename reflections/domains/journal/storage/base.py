"""The storage contract shared by every journal backend.

``StorageService`` implements the public operations once: authentication
checks, validation, the one-entry-per-day rule, statistics and result
wrapping. Backends only supply the ``_``-prefixed primitives that touch
their medium.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from reflections.core.auth.identity import IdentityDirectory, require_user
from reflections.core.results import NOT_FOUND, ServiceResult
from reflections.core.users.models import User
from reflections.core.utils.decorators import service_operation
from reflections.domains.journal.models.tag import DEFAULT_TAG_COLOR
from reflections.domains.journal.moods import Mood
from reflections.domains.journal.schemas import (
    JournalEntryData,
    JournalQuery,
    JournalStatistics,
    PagedResult,
    TagData,
)
from reflections.domains.journal.services import export_service, stats_service

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

DEFAULT_TAGS = (
    ("Work", "#1976d2"),
    ("Career", "#1565c0"),
    ("Studies", "#0d47a1"),
    ("Projects", "#2196f3"),
    ("Planning", "#42a5f5"),
    ("Family", "#e91e63"),
    ("Friends", "#ec407a"),
    ("Relationships", "#f06292"),
    ("Parenting", "#f48fb1"),
    ("Health", "#f44336"),
    ("Fitness", "#e53935"),
    ("Exercise", "#c62828"),
    ("Yoga", "#d32f2f"),
    ("Meditation", "#ef5350"),
    ("Self-care", "#f44336"),
    ("Personal Growth", "#7b1fa2"),
    ("Spirituality", "#6a1b9a"),
    ("Reflection", "#512da8"),
    ("Reading", "#7e57c2"),
    ("Writing", "#9575cd"),
    ("Hobbies", "#ff6f00"),
    ("Music", "#e65100"),
    ("Cooking", "#bf360c"),
    ("Shopping", "#ff6f00"),
    ("Travel", "#00897b"),
    ("Nature", "#009688"),
    ("Vacation", "#26a69a"),
    ("Finance", "#fbc02d"),
    ("Birthday", "#ff4081"),
    ("Holiday", "#d81b60"),
    ("Celebration", "#f50057"),
    ("Gratitude", "#4caf50"),
    ("Ideas", "#ff9800"),
)


class StorageService(ABC):
    """Facade over journal entries and tags, scoped per user."""

    backend_name = "abstract"

    def __init__(
        self,
        identity: Optional[IdentityDirectory] = None,
        streak_lookback_days: int = stats_service.DEFAULT_STREAK_LOOKBACK_DAYS,
    ):
        self.identity = identity if identity is not None else IdentityDirectory()
        self.streak_lookback_days = streak_lookback_days

    # --- lifecycle ---

    def initialize(self) -> ServiceResult[bool]:
        """Prepare the medium and seed global tags. Safe to call repeatedly.

        Errors here are not wrapped: a storage that cannot be created should
        stop startup.
        """
        self.identity.initialize()
        self._initialize_storage()
        if not self._has_tags():
            self._insert_tags([TagData(name=name, color=color) for name, color in DEFAULT_TAGS])
            logger.info("Seeded %d default tags (%s backend)", len(DEFAULT_TAGS), self.backend_name)
        return ServiceResult.ok(True)

    # --- entry queries ---

    @service_operation("getting entry by date")
    def get_entry_by_date(self, user: Optional[User], day: date) -> ServiceResult[Optional[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        return ServiceResult.ok(self._find_entry_by_date(user.id, day))

    @service_operation("getting entry")
    def get_entry(self, user: Optional[User], entry_id: str) -> ServiceResult[Optional[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        entry = self._find_entry(entry_id)
        if entry is None or entry.user_id != user.id:
            return ServiceResult.ok(None)
        return ServiceResult.ok(entry)

    @service_operation("getting all entries")
    def get_all_entries(self, user: Optional[User]) -> ServiceResult[List[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        return ServiceResult.ok(self._list_entries(user.id))

    @service_operation("getting entries by month")
    def get_entries_by_month(self, user: Optional[User], year: int, month: int) -> ServiceResult[List[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        if not 1 <= month <= 12:
            return ServiceResult.fail("Month must be between 1 and 12")
        return ServiceResult.ok(self._list_entries_in_month(user.id, year, month))

    @service_operation("searching entries")
    def search_entries(self, user: Optional[User], term: Optional[str]) -> ServiceResult[List[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        needle = (term or "").strip()
        if not needle:
            return ServiceResult.ok(self._list_entries(user.id))
        return ServiceResult.ok(self._search_entries(user.id, needle.lower()))

    @service_operation("getting entries by mood")
    def get_entries_by_mood(self, user: Optional[User], mood: object) -> ServiceResult[List[JournalEntryData]]:
        # Scoped to the caller like every other query.
        denied = require_user(user)
        if denied:
            return denied
        parsed = Mood.parse(mood)
        if parsed is None:
            return ServiceResult.fail(f"Unknown mood: {mood}")
        return ServiceResult.ok(self._list_entries_by_mood(user.id, parsed))

    @service_operation("querying entries")
    def query_entries(self, user: Optional[User], query: JournalQuery) -> ServiceResult[PagedResult[JournalEntryData]]:
        denied = require_user(user)
        if denied:
            return denied
        matches = self._filter_entries(user.id, query)
        start = (query.page - 1) * query.page_size
        return ServiceResult.ok(
            PagedResult[JournalEntryData](
                items=matches[start : start + query.page_size],
                total_count=len(matches),
                page_number=query.page,
                page_size=query.page_size,
            )
        )

    # --- entry mutations ---

    @service_operation("saving entry")
    def save_entry(self, user: Optional[User], entry: JournalEntryData) -> ServiceResult[JournalEntryData]:
        denied = require_user(user)
        if denied:
            return denied
        if not (entry.content or "").strip():
            return ServiceResult.fail("Content is required")

        data = entry.model_copy(deep=True)
        if data.entry_date is None:
            data.entry_date = date.today()

        existing = self._find_entry(data.id)
        if existing is not None and existing.user_id != user.id:
            return ServiceResult.fail(NOT_FOUND)

        same_day = self._find_entry_by_date(user.id, data.entry_date)
        if same_day is not None and same_day.id != data.id:
            return ServiceResult.fail(f"An entry already exists for {data.entry_date.isoformat()}")

        now = datetime.utcnow()
        data.user_id = user.id
        data.updated_at = now
        if existing is None:
            data.created_at = now
            saved = self._insert_entry(data)
            logger.info("Created entry %s for user %s on %s", saved.id, user.id, saved.entry_date)
        else:
            data.created_at = existing.created_at
            saved = self._update_entry(data)
            logger.info("Updated entry %s", saved.id)
        return ServiceResult.ok(saved)

    @service_operation("deleting entry")
    def delete_entry(self, entry_id: str, user: Optional[User] = None) -> ServiceResult[bool]:
        existing = self._find_entry(entry_id)
        if existing is None or (user is not None and existing.user_id != user.id):
            return ServiceResult.fail(NOT_FOUND)
        self._delete_entry(entry_id)
        logger.info("Deleted entry %s", entry_id)
        return ServiceResult.ok(True)

    # --- tags ---

    @service_operation("getting tags")
    def get_all_tags(self, user: Optional[User]) -> ServiceResult[List[TagData]]:
        denied = require_user(user)
        if denied:
            return denied
        return ServiceResult.ok(self._list_tags(user.id))

    @service_operation("adding tag")
    def add_tag(self, user: Optional[User], name: str, color: str = DEFAULT_TAG_COLOR) -> ServiceResult[TagData]:
        denied = require_user(user)
        if denied:
            return denied
        name = (name or "").strip()
        if not name:
            return ServiceResult.fail("Tag name is required")
        if not HEX_COLOR.match(color or ""):
            return ServiceResult.fail("Color must be a hex value like #1976d2")

        existing = self._find_tag(user.id, name)
        if existing is not None:
            return ServiceResult.ok(existing)
        tag = self._insert_tags([TagData(user_id=user.id, name=name, color=color)])[0]
        logger.info("Created tag %s for user %s", tag.name, user.id)
        return ServiceResult.ok(tag)

    # --- statistics ---

    @service_operation("calculating statistics")
    def get_statistics(self, user: Optional[User]) -> ServiceResult[JournalStatistics]:
        denied = require_user(user)
        if denied:
            return denied
        stats = stats_service.compute_statistics(self._list_entries(user.id), cap=self.streak_lookback_days)
        logger.debug(
            "Statistics for %s: total=%d current=%d longest=%d",
            user.id,
            stats.total_entries,
            stats.current_streak,
            stats.longest_streak,
        )
        return ServiceResult.ok(stats)

    @service_operation("counting entries")
    def get_entry_count(self, user: Optional[User], start: date, end: date) -> ServiceResult[int]:
        denied = require_user(user)
        if denied:
            return denied
        if start > end:
            return ServiceResult.fail("Start date must not be after end date")
        return ServiceResult.ok(self._count_entries_between(user.id, start, end))

    @service_operation("calculating word count")
    def get_total_word_count(self, user: Optional[User]) -> ServiceResult[int]:
        denied = require_user(user)
        if denied:
            return denied
        return ServiceResult.ok(stats_service.total_word_count(self._list_entries(user.id)))

    @service_operation("exporting entries")
    def export_entries(self, user: Optional[User]) -> ServiceResult[str]:
        denied = require_user(user)
        if denied:
            return denied
        return ServiceResult.ok(export_service.export_json(self._list_entries(user.id)))

    # --- backend primitives ---

    def _rollback(self) -> None:
        """Undo partial work after a failed operation."""

    @abstractmethod
    def _initialize_storage(self) -> None: ...

    @abstractmethod
    def _find_entry(self, entry_id: str) -> Optional[JournalEntryData]: ...

    @abstractmethod
    def _find_entry_by_date(self, user_id: str, day: date) -> Optional[JournalEntryData]: ...

    @abstractmethod
    def _list_entries(self, user_id: str) -> List[JournalEntryData]:
        """All of a user's entries, newest first."""

    @abstractmethod
    def _list_entries_in_month(self, user_id: str, year: int, month: int) -> List[JournalEntryData]: ...

    @abstractmethod
    def _search_entries(self, user_id: str, needle: str) -> List[JournalEntryData]:
        """Entries whose title or content contains the lower-cased ``needle``."""

    @abstractmethod
    def _list_entries_by_mood(self, user_id: str, mood: Mood) -> List[JournalEntryData]: ...

    @abstractmethod
    def _filter_entries(self, user_id: str, query: JournalQuery) -> List[JournalEntryData]:
        """Every entry matching ``query`` (unpaged), newest first."""

    @abstractmethod
    def _count_entries_between(self, user_id: str, start: date, end: date) -> int: ...

    @abstractmethod
    def _insert_entry(self, entry: JournalEntryData) -> JournalEntryData: ...

    @abstractmethod
    def _update_entry(self, entry: JournalEntryData) -> JournalEntryData: ...

    @abstractmethod
    def _delete_entry(self, entry_id: str) -> None: ...

    @abstractmethod
    def _has_tags(self) -> bool: ...

    @abstractmethod
    def _list_tags(self, user_id: str) -> List[TagData]:
        """The user's own tags plus global tags, ordered by name."""

    @abstractmethod
    def _find_tag(self, user_id: str, name: str) -> Optional[TagData]:
        """Case-insensitive lookup among the tags visible to the user."""

    @abstractmethod
    def _insert_tags(self, tags: List[TagData]) -> List[TagData]: ...
