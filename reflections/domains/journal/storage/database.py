"""Relational journal storage on SQLAlchemy."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import extract, or_

from reflections.domains.journal.mappers import map_entry, map_tag
from reflections.domains.journal.models import JournalEntry, Tag
from reflections.domains.journal.moods import Mood
from reflections.domains.journal.schemas import JournalEntryData, JournalQuery, TagData
from reflections.domains.journal.storage.base import StorageService
from reflections.extensions import db

_ENTRY_FIELDS = (
    "title",
    "content",
    "entry_date",
    "mood",
    "secondary_mood",
    "category",
    "tags",
    "is_rich_text",
    "updated_at",
)


def _like_pattern(needle: str) -> str:
    escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DatabaseStorageService(StorageService):
    """
    Entries and tags in SQL tables.

    The unique index on (user_id, entry_date) backs up the facade's
    one-entry-per-day check; every mutation commits on its own.
    """

    backend_name = "database"

    def _rollback(self) -> None:
        db.session.rollback()

    def _initialize_storage(self) -> None:
        db.create_all()

    def _user_entries(self, user_id: str):
        return JournalEntry.query.filter_by(user_id=user_id)

    @staticmethod
    def _newest_first(query) -> List[JournalEntryData]:
        rows = query.order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc()).all()
        return [map_entry(row) for row in rows]

    # --- entries ---

    def _find_entry(self, entry_id: str) -> Optional[JournalEntryData]:
        row = db.session.get(JournalEntry, str(entry_id))
        return map_entry(row) if row else None

    def _find_entry_by_date(self, user_id: str, day: date) -> Optional[JournalEntryData]:
        row = self._user_entries(user_id).filter_by(entry_date=day).first()
        return map_entry(row) if row else None

    def _list_entries(self, user_id: str) -> List[JournalEntryData]:
        return self._newest_first(self._user_entries(user_id))

    def _list_entries_in_month(self, user_id: str, year: int, month: int) -> List[JournalEntryData]:
        query = self._user_entries(user_id).filter(
            extract("year", JournalEntry.entry_date) == year,
            extract("month", JournalEntry.entry_date) == month,
        )
        return self._newest_first(query)

    def _search_entries(self, user_id: str, needle: str) -> List[JournalEntryData]:
        like = _like_pattern(needle)
        query = self._user_entries(user_id).filter(
            or_(
                JournalEntry.title.ilike(like, escape="\\"),
                JournalEntry.content.ilike(like, escape="\\"),
            )
        )
        return self._newest_first(query)

    def _list_entries_by_mood(self, user_id: str, mood: Mood) -> List[JournalEntryData]:
        return self._newest_first(self._user_entries(user_id).filter(JournalEntry.mood == mood))

    def _filter_entries(self, user_id: str, query: JournalQuery) -> List[JournalEntryData]:
        sql = self._user_entries(user_id)
        term = (query.search_text or "").strip().lower()
        if term:
            like = _like_pattern(term)
            sql = sql.filter(
                or_(
                    JournalEntry.title.ilike(like, escape="\\"),
                    JournalEntry.content.ilike(like, escape="\\"),
                )
            )
        if query.start_date:
            sql = sql.filter(JournalEntry.entry_date >= query.start_date)
        if query.end_date:
            sql = sql.filter(JournalEntry.entry_date <= query.end_date)
        if query.moods:
            sql = sql.filter(JournalEntry.mood.in_(query.moods))
        entries = self._newest_first(sql)
        if not query.tags:
            return entries
        # JSON containment is not portable across dialects (SQLite in
        # particular), so tag filtering happens after the query.
        return [entry for entry in entries if query.matches(entry)]

    def _count_entries_between(self, user_id: str, start: date, end: date) -> int:
        return (
            self._user_entries(user_id)
            .filter(JournalEntry.entry_date >= start, JournalEntry.entry_date <= end)
            .count()
        )

    def _insert_entry(self, entry: JournalEntryData) -> JournalEntryData:
        row = JournalEntry(
            id=entry.id,
            user_id=entry.user_id,
            created_at=entry.created_at,
            **{field: getattr(entry, field) for field in _ENTRY_FIELDS},
        )
        row.tags = list(entry.tags)
        db.session.add(row)
        db.session.commit()
        return map_entry(row)

    def _update_entry(self, entry: JournalEntryData) -> JournalEntryData:
        row = db.session.get(JournalEntry, entry.id)
        for field in _ENTRY_FIELDS:
            setattr(row, field, getattr(entry, field))
        # Fresh list so the JSON column registers the change.
        row.tags = list(entry.tags)
        db.session.commit()
        return map_entry(row)

    def _delete_entry(self, entry_id: str) -> None:
        row = db.session.get(JournalEntry, str(entry_id))
        db.session.delete(row)
        db.session.commit()

    # --- tags ---

    def _visible_tags(self, user_id: str):
        return Tag.query.filter(or_(Tag.user_id == user_id, Tag.user_id.is_(None)))

    def _has_tags(self) -> bool:
        return db.session.query(Tag.id).first() is not None

    def _list_tags(self, user_id: str) -> List[TagData]:
        return [map_tag(row) for row in self._visible_tags(user_id).order_by(Tag.name).all()]

    def _find_tag(self, user_id: str, name: str) -> Optional[TagData]:
        matches = self._visible_tags(user_id).filter(db.func.lower(Tag.name) == name.lower()).all()
        if not matches:
            return None
        # The user's own tag wins over a global one of the same name.
        matches.sort(key=lambda row: row.user_id is None)
        return map_tag(matches[0])

    def _insert_tags(self, tags: List[TagData]) -> List[TagData]:
        rows = [Tag(id=tag.id, user_id=tag.user_id, name=tag.name, color=tag.color) for tag in tags]
        db.session.add_all(rows)
        db.session.commit()
        return [map_tag(row) for row in rows]
