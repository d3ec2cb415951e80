from reflections.domains.journal.schemas.journal_schemas import (
    EntrySaveRequest,
    JournalEntryData,
    JournalQuery,
    JournalStatistics,
    PagedResult,
    TagCreateRequest,
    TagData,
)

__all__ = [
    "EntrySaveRequest",
    "JournalEntryData",
    "JournalQuery",
    "JournalStatistics",
    "PagedResult",
    "TagCreateRequest",
    "TagData",
]
