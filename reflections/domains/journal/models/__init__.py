"""Journal ORM models."""

from reflections.domains.journal.models.journal_entry import JournalEntry
from reflections.domains.journal.models.tag import Tag

__all__ = ["JournalEntry", "Tag"]
