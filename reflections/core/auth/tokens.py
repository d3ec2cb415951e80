"""Capability tokens for authenticated sessions."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from reflections.core.auth.models import RevokedToken
from reflections.core.users.models import User
from reflections.extensions import jwt


@jwt.token_in_blocklist_loader
def _token_revoked(jwt_header, jwt_payload) -> bool:
    return RevokedToken.is_revoked(jwt_payload.get("jti"))


def issue_token(user: User, expires_in: Optional[timedelta] = None) -> str:
    """Create a signed bearer token embedding the user id and an expiry."""
    return create_access_token(
        identity=str(user.id),
        additional_claims={"username": user.username, "email": user.email},
        expires_delta=expires_in,
    )


def read_token_claims(token: str) -> Optional[dict]:
    """Decoded claims of a valid, unexpired, unrevoked token; otherwise None."""
    if not token:
        return None
    try:
        claims = decode_token(token)
    except (JWTExtendedException, PyJWTError):
        return None
    if RevokedToken.is_revoked(claims.get("jti")):
        return None
    return claims


def read_token_subject(token: str) -> Optional[str]:
    """Return the user id carried by ``token``, or None if invalid, expired or revoked."""
    claims = read_token_claims(token)
    return claims.get("sub") if claims else None
