"""Identity directory: registration, login and the local session."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, or_

from reflections.core.auth.models import RevokedToken
from reflections.core.auth.password import hash_password, verify_password
from reflections.core.auth.secure_store import MemorySecureStore, SecureStore
from reflections.core.auth.tokens import issue_token, read_token_subject
from reflections.core.results import NOT_AUTHENTICATED, ServiceResult
from reflections.core.users.models import THEMES, User
from reflections.core.utils.decorators import service_operation
from reflections.extensions import db

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
THEME_KEY = "app_theme"
MIN_PASSWORD_LENGTH = 8
INVALID_CREDENTIALS = "Invalid username or password"


class IdentityDirectory:
    """
    Owns user records and the process-wide session (current user + token).

    The session cache is private to this object; storage operations receive
    the resolved user explicitly instead of reading it from here.
    """

    def __init__(
        self,
        secure_store: Optional[SecureStore] = None,
        token_ttl: Optional[timedelta] = None,
    ):
        self.secure_store = secure_store if secure_store is not None else MemorySecureStore()
        self.token_ttl = token_ttl
        self._current_user_id: Optional[str] = None
        self._current_token: Optional[str] = None

    def initialize(self) -> None:
        """Create the users table when missing. User records are always relational."""
        db.create_all()

    # --- registration and login ---

    @service_operation("registering user")
    def register(self, username: str, email: str, full_name: str, password: str) -> ServiceResult[str]:
        username = (username or "").strip()
        email = (email or "").strip()
        if not username:
            return ServiceResult.fail("Username cannot be empty")
        if not email:
            return ServiceResult.fail("Email cannot be empty")
        if not password or not password.strip():
            return ServiceResult.fail("Password cannot be empty")
        if self._find_by_username(username):
            return ServiceResult.fail("Username already exists")
        if self._find_by_email(email):
            return ServiceResult.fail("Email already exists")
        strength = self.validate_password_strength(password)
        if not strength.success:
            return ServiceResult.fail(strength.error or "Password is too weak")

        user = User(
            username=username,
            email=email.lower(),
            full_name=(full_name or "").strip(),
            password_hash=hash_password(password),
            created_at=datetime.utcnow(),
            is_active=True,
        )
        db.session.add(user)
        db.session.commit()
        logger.info("Registered user %s", user.id)

        token = issue_token(user, self.token_ttl)
        self._start_session(user, token)
        return ServiceResult.ok(token)

    @service_operation("logging in")
    def login(self, username_or_email: str, password: str) -> ServiceResult[str]:
        login_name = (username_or_email or "").strip()
        if not login_name:
            return ServiceResult.fail("Username or email is required")
        if not password:
            return ServiceResult.fail("Password is required")

        lowered = login_name.lower()
        user = User.query.filter(
            or_(func.lower(User.username) == lowered, func.lower(User.email) == lowered)
        ).first()
        if user is None or not verify_password(password, user.password_hash):
            return ServiceResult.fail(INVALID_CREDENTIALS)
        if not user.is_active:
            return ServiceResult.fail("Account is inactive")

        user.last_login_at = datetime.utcnow()
        db.session.commit()

        token = issue_token(user, self.token_ttl)
        self._start_session(user, token)
        logger.info("User %s logged in", user.id)
        return ServiceResult.ok(token)

    def logout(self, user: Optional[User] = None) -> None:
        """End the local session.

        With ``user`` given, the session is only cleared when it belongs to
        that user; another user's persisted token is left in place.
        """
        if user is not None and not self._session_belongs_to(user.id):
            return
        if self._current_user_id:
            logger.info("User %s logged out", self._current_user_id)
        self._current_user_id = None
        self._current_token = None
        self.secure_store.remove(TOKEN_KEY)

    @service_operation("revoking token")
    def revoke_token(self, jti: str, user: Optional[User] = None) -> ServiceResult[bool]:
        """Block a token id so it no longer authenticates, even before it expires."""
        if not jti:
            return ServiceResult.fail("Token id is required")
        if not RevokedToken.is_revoked(jti):
            db.session.add(RevokedToken(jti=jti, user_id=user.id if user is not None else None))
            db.session.commit()
            logger.info("Revoked token %s", jti)
        return ServiceResult.ok(True)

    # --- session resolution ---

    @service_operation("resolving current user")
    def get_current_user(self) -> ServiceResult[Optional[User]]:
        if self._current_user_id:
            user = self.get_user(self._current_user_id)
            if user is not None:
                return ServiceResult.ok(user)
            # Deactivated or removed since the session started.
            self._current_user_id = None
            self._current_token = None

        token = self.secure_store.get(TOKEN_KEY)
        if token:
            user = self.resolve_token(token)
            if user is not None:
                self._current_user_id = user.id
                self._current_token = token
                return ServiceResult.ok(user)

        return ServiceResult.ok(None)

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        """Return the active user with ``user_id`` or None."""
        if not user_id:
            return None
        user = db.session.get(User, str(user_id))
        if user is None or not user.is_active:
            return None
        return user

    def resolve_token(self, token: str) -> Optional[User]:
        return self.get_user(read_token_subject(token))

    def is_authenticated(self) -> bool:
        result = self.get_current_user()
        return result.success and result.data is not None

    def get_token(self) -> ServiceResult[str]:
        if self._current_token:
            return ServiceResult.ok(self._current_token)
        token = self.secure_store.get(TOKEN_KEY)
        if not token:
            return ServiceResult.fail("No token available")
        self._current_token = token
        return ServiceResult.ok(token)

    # --- account maintenance ---

    def validate_password_strength(self, password: str) -> ServiceResult[bool]:
        if not password or not password.strip():
            return ServiceResult.fail("Password cannot be empty")
        if len(password) < MIN_PASSWORD_LENGTH:
            return ServiceResult.fail(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not any(ch.isupper() for ch in password):
            return ServiceResult.fail("Password must contain at least one uppercase letter")
        if not any(ch.islower() for ch in password):
            return ServiceResult.fail("Password must contain at least one lowercase letter")
        if not any(ch.isdigit() for ch in password):
            return ServiceResult.fail("Password must contain at least one number")
        if all(ch.isalnum() for ch in password):
            return ServiceResult.fail("Password must contain at least one special character")
        return ServiceResult.ok(True)

    @service_operation("changing password")
    def change_password(
        self, current_password: str, new_password: str, user: Optional[User] = None
    ) -> ServiceResult[bool]:
        user = user if user is not None else self.get_current_user().data
        if user is None:
            return ServiceResult.fail("No user is currently logged in")
        if not verify_password(current_password or "", user.password_hash):
            return ServiceResult.fail("Current password is incorrect")
        strength = self.validate_password_strength(new_password)
        if not strength.success:
            return ServiceResult.fail(strength.error or "Password is too weak")

        user.password_hash = hash_password(new_password)
        db.session.commit()
        logger.info("Password changed for user %s", user.id)
        return ServiceResult.ok(True)

    @service_operation("setting theme")
    def set_theme(self, theme: str, user: Optional[User] = None) -> ServiceResult[str]:
        if theme not in THEMES:
            return ServiceResult.fail("Theme must be 'light' or 'dark'")
        self.secure_store.set(THEME_KEY, theme)
        user = user if user is not None else self.get_current_user().data
        if user is not None:
            user.preferred_theme = theme
            db.session.commit()
        return ServiceResult.ok(theme)

    def get_theme(self) -> str:
        return self.secure_store.get(THEME_KEY) or "light"

    @service_operation("deactivating user")
    def deactivate_user(self, user_id: str) -> ServiceResult[bool]:
        user = db.session.get(User, str(user_id))
        if user is None:
            return ServiceResult.fail("User not found")
        user.is_active = False
        db.session.commit()
        if self._current_user_id == user.id:
            self.logout()
        logger.info("Deactivated user %s", user.id)
        return ServiceResult.ok(True)

    # --- helpers ---

    def _start_session(self, user: User, token: str) -> None:
        self.secure_store.set(TOKEN_KEY, token)
        self._current_user_id = user.id
        self._current_token = token

    def _session_belongs_to(self, user_id: str) -> bool:
        if self._current_user_id:
            return self._current_user_id == user_id
        return read_token_subject(self.secure_store.get(TOKEN_KEY) or "") == user_id

    def _find_by_username(self, username: str) -> Optional[User]:
        return User.query.filter(func.lower(User.username) == username.lower()).first()

    def _find_by_email(self, email: str) -> Optional[User]:
        return User.query.filter(func.lower(User.email) == email.lower()).first()

    def _rollback(self) -> None:
        db.session.rollback()


def require_user(user: Optional[User]) -> Optional[ServiceResult]:
    """Return a failed result when ``user`` cannot act, else None."""
    if user is None or not user.is_active:
        return ServiceResult.fail(NOT_AUTHENTICATED)
    return None
