"""Auth persistence: revoked bearer tokens."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from reflections.extensions import db


class RevokedToken(db.Model):
    __tablename__ = "jwt_blocklist"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    jti: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False)
    user_id: Mapped[str | None] = mapped_column(db.ForeignKey("users.id"))
    revoked_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    @classmethod
    def is_revoked(cls, jti: Optional[str]) -> bool:
        if not jti:
            return False
        return db.session.query(cls.id).filter_by(jti=jti).first() is not None
