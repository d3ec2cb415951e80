"""Personal journal entry."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflections.domains.journal.moods import Mood
from reflections.extensions import db


class JournalEntry(db.Model):
    __tablename__ = "journal_entries"
    __table_args__ = (
        # One entry per user per calendar day.
        db.UniqueConstraint("user_id", "entry_date", name="uq_journal_entries_user_date"),
        db.Index("ix_journal_entries_user_mood", "user_id", "mood"),
    )

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(db.ForeignKey("users.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(db.String(500), default="")
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    entry_date: Mapped[date] = mapped_column(default=date.today, nullable=False)
    mood: Mapped[Mood | None] = mapped_column(
        db.Enum(Mood, native_enum=False, length=32, values_callable=lambda enum: [m.value for m in enum])
    )
    secondary_mood: Mapped[str] = mapped_column(db.String(100), default="")
    category: Mapped[str] = mapped_column(db.String(100), default="")
    tags: Mapped[list] = mapped_column(db.JSON, default=list)
    is_rich_text: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
