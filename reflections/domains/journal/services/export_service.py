"""Portable exports of journal entries."""

from __future__ import annotations

import json
from datetime import datetime
from typing import List

from pydantic import TypeAdapter

from reflections.domains.journal.schemas import JournalEntryData

_ENTRIES = TypeAdapter(List[JournalEntryData])


def export_json(entries: List[JournalEntryData], title: str = "Journal Export") -> str:
    """Serialize entries, oldest first, into an indented JSON document."""
    ordered = sorted(entries, key=lambda e: (e.entry_date is None, e.entry_date))
    document = {
        "title": title,
        "exported_at": datetime.utcnow().isoformat(timespec="seconds"),
        "count": len(ordered),
        "entries": _ENTRIES.dump_python(ordered, mode="json"),
    }
    return json.dumps(document, indent=2)
