"""Named, colored labels attached to entries."""

from __future__ import annotations

import uuid

from sqlalchemy.orm import Mapped, mapped_column

from reflections.extensions import db

DEFAULT_TAG_COLOR = "#1976d2"


class Tag(db.Model):
    __tablename__ = "tags"
    __table_args__ = (db.UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # NULL marks a global tag seeded at initialization.
    user_id: Mapped[str | None] = mapped_column(db.ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False)
    color: Mapped[str] = mapped_column(db.String(7), nullable=False, default=DEFAULT_TAG_COLOR)
