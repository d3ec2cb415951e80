"""CSRF tokens kept in the signed Flask session cookie."""

from __future__ import annotations

import secrets

from flask import session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"


def generate_csrf_token() -> str:
    """Return the session's CSRF token, minting one on first use."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def discard_csrf_token() -> None:
    session.pop(CSRF_TOKEN_SESSION_KEY, None)


def validate_csrf_token(token: str) -> bool:
    if not token:
        return False
    expected = session.get(CSRF_TOKEN_SESSION_KEY)
    if not expected:
        return False
    return secrets.compare_digest(token, expected)
