"""Journal data transfer objects shared by both storage backends."""

from __future__ import annotations

import math
import re
import uuid
from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reflections.domains.journal.models.tag import DEFAULT_TAG_COLOR
from reflections.domains.journal.moods import Mood

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

T = TypeVar("T")


def _new_id() -> str:
    return str(uuid.uuid4())


def _mood_or_none(value):
    if value is None or value == "":
        return None
    parsed = Mood.parse(value)
    if parsed is None:
        raise ValueError(f"unknown mood: {value}")
    return parsed


class JournalEntryData(BaseModel):
    """A journal entry as seen by callers of the storage facade."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=_new_id)
    user_id: Optional[str] = None
    title: str = ""
    content: str = ""
    entry_date: Optional[date] = None
    mood: Optional[Mood] = None
    secondary_mood: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    is_rich_text: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("title", "secondary_mood", "category", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, v):
        return [] if v is None else v

    @field_validator("mood", mode="before")
    @classmethod
    def _parse_mood(cls, v):
        return _mood_or_none(v)


class TagData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=_new_id)
    user_id: Optional[str] = None
    name: str
    color: str = DEFAULT_TAG_COLOR


class JournalStatistics(BaseModel):
    total_entries: int = 0
    current_streak: int = 0
    longest_streak: int = 0


class JournalQuery(BaseModel):
    """Combined filter for paged browsing."""

    search_text: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    moods: List[Mood] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=5, ge=1, le=100)

    @field_validator("moods", mode="before")
    @classmethod
    def _parse_moods(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        return [_mood_or_none(item) for item in v]

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    def matches(self, entry: JournalEntryData) -> bool:
        """Whether ``entry`` passes every filter set on this query."""
        term = (self.search_text or "").strip().lower()
        if term and term not in entry.title.lower() and term not in entry.content.lower():
            return False
        if self.start_date and (entry.entry_date is None or entry.entry_date < self.start_date):
            return False
        if self.end_date and (entry.entry_date is None or entry.entry_date > self.end_date):
            return False
        if self.moods and entry.mood not in self.moods:
            return False
        if self.tags:
            wanted = {t.lower() for t in self.tags}
            if not wanted.intersection(t.lower() for t in entry.tags):
                return False
        return True


class PagedResult(BaseModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 5

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0


# --- HTTP payloads ---


class EntrySaveRequest(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(min_length=1)
    entry_date: Optional[date] = None
    mood: Optional[str] = None
    secondary_mood: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    is_rich_text: bool = False


class TagCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = DEFAULT_TAG_COLOR

    @field_validator("color")
    @classmethod
    def _hex_color(cls, v: str) -> str:
        if not HEX_COLOR.match(v):
            raise ValueError("color must look like #1976d2")
        return v
