"""Journal mappers between ORM rows, DTOs and JSON responses."""

from __future__ import annotations

from reflections.domains.journal.models import JournalEntry, Tag
from reflections.domains.journal.moods import mood_category
from reflections.domains.journal.schemas import JournalEntryData, TagData


def map_entry(entry: JournalEntry) -> JournalEntryData:
    return JournalEntryData.model_validate(entry)


def map_tag(tag: Tag) -> TagData:
    return TagData.model_validate(tag)


def entry_to_dict(entry: JournalEntryData) -> dict:
    payload = entry.model_dump(mode="json")
    payload["mood_category"] = mood_category(entry.mood) if entry.mood else None
    return payload


def tag_to_dict(tag: TagData) -> dict:
    return tag.model_dump(mode="json")
