"""Identity directory tests: registration, login, session and account upkeep."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask_jwt_extended import decode_token

from reflections.core.auth.identity import INVALID_CREDENTIALS, TOKEN_KEY, IdentityDirectory
from reflections.core.auth.models import RevokedToken
from reflections.core.auth.secure_store import FileSecureStore
from reflections.core.auth.tokens import issue_token, read_token_subject
from reflections.core.users.models import User
from reflections.extensions import db

pytestmark = pytest.mark.integration

PASSWORD = "Str0ng!Pass"


@pytest.fixture
def registered(identity):
    result = identity.register("alice", "Alice@Example.com", "Alice Liddell", PASSWORD)
    assert result.success, result.error
    return User.query.filter_by(username="alice").one()


# ==================== Registration ====================


def test_register_creates_user_and_session(identity, registered):
    assert registered.email == "alice@example.com"
    assert registered.full_name == "Alice Liddell"
    assert registered.password_hash != PASSWORD
    assert identity.is_authenticated()
    assert identity.get_current_user().data.id == registered.id
    assert identity.secure_store.exists(TOKEN_KEY)


@pytest.mark.parametrize(
    "username,email,password,error",
    [
        ("", "a@example.com", PASSWORD, "Username cannot be empty"),
        ("   ", "a@example.com", PASSWORD, "Username cannot be empty"),
        ("carol", "", PASSWORD, "Email cannot be empty"),
        ("carol", "c@example.com", "", "Password cannot be empty"),
    ],
)
def test_register_rejects_blank_fields(identity, username, email, password, error):
    result = identity.register(username, email, "", password)
    assert not result.success
    assert result.error == error


def test_register_rejects_duplicate_username_any_case(identity, registered):
    result = identity.register("ALICE", "other@example.com", "", PASSWORD)
    assert not result.success
    assert result.error == "Username already exists"


def test_register_rejects_duplicate_email_any_case(identity, registered):
    result = identity.register("alice2", "ALICE@example.COM", "", PASSWORD)
    assert not result.success
    assert result.error == "Email already exists"


def test_accented_names_compare_without_case(identity):
    assert identity.register("Ölaf", "Ölaf@Exämple.com", "Ölaf", PASSWORD).success
    assert identity.register("ölaf", "x@example.com", "", PASSWORD).error == "Username already exists"
    assert identity.register("olaf2", "ÖLAF@EXÄMPLE.COM", "", PASSWORD).error == "Email already exists"
    assert User.query.count() == 1

    identity.logout()
    assert identity.login("ölaf", PASSWORD).success
    identity.logout()
    assert identity.login("ölaf@exämple.com", PASSWORD).success


def test_register_rejects_weak_password(identity):
    result = identity.register("dave", "dave@example.com", "", "abc")
    assert not result.success
    assert result.error == "Password must be at least 8 characters"
    assert User.query.count() == 0


@pytest.mark.parametrize(
    "password,error",
    [
        ("   ", "Password cannot be empty"),
        ("Ab1!", "Password must be at least 8 characters"),
        ("abcdefg1!", "Password must contain at least one uppercase letter"),
        ("ABCDEFG1!", "Password must contain at least one lowercase letter"),
        ("Abcdefgh!", "Password must contain at least one number"),
        ("Abcdefg1", "Password must contain at least one special character"),
    ],
)
def test_password_strength_reports_first_failure(identity, password, error):
    result = identity.validate_password_strength(password)
    assert not result.success
    assert result.error == error


def test_password_strength_accepts_strong_password(identity):
    assert identity.validate_password_strength("Abcdef1!").success


# ==================== Login / Logout ====================


def test_login_by_username_or_email(identity, registered):
    identity.logout()
    by_name = identity.login("Alice", PASSWORD)
    assert by_name.success
    identity.logout()
    by_email = identity.login("alice@example.com", PASSWORD)
    assert by_email.success
    assert read_token_subject(by_email.data) == registered.id
    assert db.session.get(User, registered.id).last_login_at is not None


def test_login_errors_do_not_reveal_which_part_was_wrong(identity, registered):
    identity.logout()
    unknown = identity.login("nobody", PASSWORD)
    wrong = identity.login("alice", "Wrong!Pass1")
    assert unknown.error == wrong.error == INVALID_CREDENTIALS


def test_login_requires_both_fields(identity):
    assert identity.login("", PASSWORD).error == "Username or email is required"
    assert identity.login("alice", "").error == "Password is required"


def test_login_rejects_inactive_account(identity, registered):
    assert identity.deactivate_user(registered.id).success
    result = identity.login("alice", PASSWORD)
    assert not result.success
    assert result.error == "Account is inactive"


def test_inactive_account_with_wrong_password_gets_generic_error(identity, registered):
    identity.deactivate_user(registered.id)
    assert identity.login("alice", "Wrong!Pass1").error == INVALID_CREDENTIALS


def test_logout_clears_session_and_token(identity, registered):
    identity.logout()
    assert not identity.is_authenticated()
    assert identity.get_current_user().data is None
    assert not identity.secure_store.exists(TOKEN_KEY)
    assert identity.get_token().error == "No token available"


def test_logout_for_another_user_keeps_the_session(identity, registered):
    other = identity.register("bob", "bob@example.com", "Bob", PASSWORD)
    bob = identity.resolve_token(other.data)
    token = identity.get_token().data

    identity.logout(user=registered)
    assert identity.get_current_user().data.id == bob.id
    assert identity.secure_store.get(TOKEN_KEY) == token

    identity.logout(user=bob)
    assert not identity.is_authenticated()
    assert not identity.secure_store.exists(TOKEN_KEY)


def test_logout_for_user_matches_persisted_token(app, tmp_path, registered):
    store = FileSecureStore(tmp_path / "secure.json")
    assert IdentityDirectory(secure_store=store).login("alice", PASSWORD).success

    restarted = IdentityDirectory(secure_store=store)
    restarted.logout(user=registered)
    assert not store.exists(TOKEN_KEY)


def test_revoked_token_no_longer_resolves(app, identity, registered):
    token = identity.get_token().data
    jti = decode_token(token)["jti"]
    assert identity.revoke_token(jti, user=registered).success
    assert identity.revoke_token(jti, user=registered).success
    assert identity.resolve_token(token) is None
    assert read_token_subject(token) is None
    assert RevokedToken.query.filter_by(jti=jti).count() == 1

    # Other tokens for the same user still work.
    assert identity.resolve_token(issue_token(registered)).id == registered.id
    assert identity.revoke_token("").error == "Token id is required"


# ==================== Session resolution ====================


def test_current_user_restored_from_persisted_token(app, tmp_path, registered):
    store = FileSecureStore(tmp_path / "secure.json")
    first = IdentityDirectory(secure_store=store)
    assert first.login("alice", PASSWORD).success

    # A new directory on the same store picks the session back up.
    second = IdentityDirectory(secure_store=store)
    current = second.get_current_user()
    assert current.success
    assert current.data.id == registered.id
    assert second.get_token().data == first.get_token().data


def test_current_user_dropped_after_deactivation(identity, registered):
    assert identity.is_authenticated()
    registered.is_active = False
    db.session.commit()
    assert identity.get_current_user().data is None


def test_resolve_token_rejects_garbage_and_expired(app, identity, registered):
    assert identity.resolve_token("not-a-token") is None
    expired = issue_token(registered, timedelta(seconds=-1))
    assert identity.resolve_token(expired) is None
    assert identity.resolve_token(issue_token(registered)).id == registered.id


def test_token_carries_user_claims(app, registered):
    from flask_jwt_extended import decode_token

    claims = decode_token(issue_token(registered))
    assert claims["sub"] == registered.id
    assert claims["username"] == "alice"
    assert claims["email"] == "alice@example.com"
    assert claims["exp"] > claims["iat"]


# ==================== Account maintenance ====================


def test_change_password(identity, registered):
    result = identity.change_password(PASSWORD, "N3w!Password")
    assert result.success
    identity.logout()
    assert not identity.login("alice", PASSWORD).success
    assert identity.login("alice", "N3w!Password").success


def test_change_password_checks_current_and_strength(identity, registered):
    assert identity.change_password("Wrong!Pass1", "N3w!Password").error == "Current password is incorrect"
    assert not identity.change_password(PASSWORD, "weak").success


def test_change_password_requires_session(identity, registered):
    identity.logout()
    result = identity.change_password(PASSWORD, "N3w!Password")
    assert result.error == "No user is currently logged in"


def test_set_theme(identity, registered):
    assert identity.set_theme("dark").data == "dark"
    assert identity.get_theme() == "dark"
    assert db.session.get(User, registered.id).preferred_theme == "dark"
    assert identity.set_theme("blue").error == "Theme must be 'light' or 'dark'"


def test_deactivate_unknown_user(identity):
    assert identity.deactivate_user("missing").error == "User not found"
