"""User account model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from reflections.extensions import db

THEMES = ("light", "dark")


def _new_id() -> str:
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_username", "username", unique=True),
        db.Index("ix_users_email", "email", unique=True),
    )

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(db.String(100), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(db.String(255), default="")
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    last_login_at: Mapped[datetime | None] = mapped_column()
    is_active: Mapped[bool] = mapped_column(default=True)
    preferred_theme: Mapped[str] = mapped_column(db.String(16), default="light")

    def __repr__(self) -> str:
        return f"User(id='{self.id}', username='{self.username}')"
