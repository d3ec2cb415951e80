"""Flat-file journal storage: JSON snapshots of entries and tags."""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter

from reflections.domains.journal.moods import Mood
from reflections.domains.journal.schemas import JournalEntryData, JournalQuery, TagData
from reflections.domains.journal.storage.base import StorageService

logger = logging.getLogger(__name__)


ENTRIES_FILE = "entries.json"
TAGS_FILE = "tags.json"

_ENTRY_LIST = TypeAdapter(List[JournalEntryData])
_TAG_LIST = TypeAdapter(List[TagData])


def _newest_first(entries: Sequence[JournalEntryData]) -> List[JournalEntryData]:
    return sorted(
        (entry.model_copy(deep=True) for entry in entries),
        key=lambda e: (e.entry_date or date.min, e.created_at is not None, e.created_at),
        reverse=True,
    )


class FileStorageService(StorageService):
    """
    Entries and tags held in memory and mirrored to two JSON files.

    Every mutation rewrites the affected snapshot in full. The in-memory list
    is only swapped after the write succeeds, so a failed write leaves the
    previous state in place. There is no journal or write-ahead log.
    """

    backend_name = "file"

    def __init__(self, data_dir: Path | str, **kwargs):
        super().__init__(**kwargs)
        self.data_dir = Path(data_dir).expanduser()
        self.entries_path = self.data_dir / ENTRIES_FILE
        self.tags_path = self.data_dir / TAGS_FILE
        self._entries: List[JournalEntryData] = []
        self._tags: List[TagData] = []

    # --- snapshot IO ---

    def _initialize_storage(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._entries = self._load(self.entries_path, _ENTRY_LIST)
        self._tags = self._load(self.tags_path, _TAG_LIST)
        logger.info(
            "Loaded %d entries and %d tags from %s",
            len(self._entries),
            len(self._tags),
            self.data_dir,
        )

    @staticmethod
    def _load(path: Path, adapter: TypeAdapter) -> list:
        if not path.exists():
            return []
        raw = path.read_bytes()
        if not raw.strip():
            return []
        return adapter.validate_json(raw)

    @staticmethod
    def _write(path: Path, adapter: TypeAdapter, items: list) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_bytes(adapter.dump_json(items, indent=2))
        os.replace(tmp_path, path)

    def _commit_entries(self, entries: List[JournalEntryData]) -> None:
        self._write(self.entries_path, _ENTRY_LIST, entries)
        self._entries = entries

    def _commit_tags(self, tags: List[TagData]) -> None:
        self._write(self.tags_path, _TAG_LIST, tags)
        self._tags = tags

    # --- entries ---

    def _owned(self, user_id: str) -> List[JournalEntryData]:
        return [entry for entry in self._entries if entry.user_id == user_id]

    def _find_entry(self, entry_id: str) -> Optional[JournalEntryData]:
        for entry in self._entries:
            if entry.id == str(entry_id):
                return entry.model_copy(deep=True)
        return None

    def _find_entry_by_date(self, user_id: str, day: date) -> Optional[JournalEntryData]:
        for entry in self._owned(user_id):
            if entry.entry_date == day:
                return entry.model_copy(deep=True)
        return None

    def _list_entries(self, user_id: str) -> List[JournalEntryData]:
        return _newest_first(self._owned(user_id))

    def _list_entries_in_month(self, user_id: str, year: int, month: int) -> List[JournalEntryData]:
        return _newest_first(
            [
                entry
                for entry in self._owned(user_id)
                if entry.entry_date and entry.entry_date.year == year and entry.entry_date.month == month
            ]
        )

    def _search_entries(self, user_id: str, needle: str) -> List[JournalEntryData]:
        return _newest_first(
            [
                entry
                for entry in self._owned(user_id)
                if needle in entry.title.lower() or needle in entry.content.lower()
            ]
        )

    def _list_entries_by_mood(self, user_id: str, mood: Mood) -> List[JournalEntryData]:
        return _newest_first([entry for entry in self._owned(user_id) if entry.mood == mood])

    def _filter_entries(self, user_id: str, query: JournalQuery) -> List[JournalEntryData]:
        return _newest_first([entry for entry in self._owned(user_id) if query.matches(entry)])

    def _count_entries_between(self, user_id: str, start: date, end: date) -> int:
        return sum(
            1 for entry in self._owned(user_id) if entry.entry_date and start <= entry.entry_date <= end
        )

    def _insert_entry(self, entry: JournalEntryData) -> JournalEntryData:
        stored = entry.model_copy(deep=True)
        self._commit_entries([*self._entries, stored])
        return stored.model_copy(deep=True)

    def _update_entry(self, entry: JournalEntryData) -> JournalEntryData:
        stored = entry.model_copy(deep=True)
        self._commit_entries([stored if e.id == stored.id else e for e in self._entries])
        return stored.model_copy(deep=True)

    def _delete_entry(self, entry_id: str) -> None:
        self._commit_entries([e for e in self._entries if e.id != str(entry_id)])

    # --- tags ---

    def _visible_tags(self, user_id: str) -> List[TagData]:
        return [tag for tag in self._tags if tag.user_id in (user_id, None)]

    def _has_tags(self) -> bool:
        return bool(self._tags)

    def _list_tags(self, user_id: str) -> List[TagData]:
        return sorted((tag.model_copy() for tag in self._visible_tags(user_id)), key=lambda t: t.name)

    def _find_tag(self, user_id: str, name: str) -> Optional[TagData]:
        matches = [tag for tag in self._visible_tags(user_id) if tag.name.lower() == name.lower()]
        if not matches:
            return None
        matches.sort(key=lambda tag: tag.user_id is None)
        return matches[0].model_copy()

    def _insert_tags(self, tags: List[TagData]) -> List[TagData]:
        stored = [tag.model_copy() for tag in tags]
        self._commit_tags([*self._tags, *stored])
        return [tag.model_copy() for tag in stored]
