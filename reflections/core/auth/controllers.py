"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, session
from flask_jwt_extended import get_jwt, jwt_required
from pydantic import ValidationError

from reflections.core.auth.csrf import discard_csrf_token, generate_csrf_token
from reflections.core.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ThemeRequest,
)
from reflections.core.users.schemas import serialize_user
from reflections.core.utils.decorators import csrf_protected
from reflections.core.utils.http import (
    get_request_user,
    get_storage,
    result_response,
    status_for,
    validation_error,
)
from reflections.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _session_response(token: str, status: int = 200):
    identity = get_storage().identity
    user = identity.resolve_token(token)
    return (
        jsonify(
            {
                "ok": True,
                "access_token": token,
                "csrf_token": generate_csrf_token(),
                "user": serialize_user(user).model_dump(mode="json") if user else None,
            }
        ),
        status,
    )


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().identity.register(data.username, data.email, data.full_name or "", data.password)
    if not result.success:
        return jsonify({"ok": False, "error": result.error}), status_for(result)
    return _session_response(result.data, 201)


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    # Ensure login is stateless even if a stale Flask session cookie is present.
    session.clear()
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().identity.login(data.username_or_email, data.password)
    if not result.success:
        return jsonify({"ok": False, "error": result.error}), 401
    return _session_response(result.data)


@auth_bp.post("/logout")
@jwt_required()
@csrf_protected
def logout():
    identity = get_storage().identity
    user = get_request_user()
    revoked = identity.revoke_token(get_jwt().get("jti"), user=user)
    if not revoked.success:
        return result_response(revoked, "revoked")
    # Only the caller's own local session is ended.
    identity.logout(user=user)
    discard_csrf_token()
    return jsonify({"ok": True})


@auth_bp.get("/me")
@jwt_required()
def me():
    user = get_request_user()
    if user is None:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump(mode="json")})


@auth_bp.post("/change-password")
@jwt_required()
@csrf_protected
def change_password():
    payload = request.get_json(silent=True) or {}
    try:
        data = ChangePasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    user = get_request_user()
    if user is None:
        return jsonify({"ok": False, "error": "No user is currently logged in"}), 401
    result = get_storage().identity.change_password(data.current_password, data.new_password, user=user)
    return result_response(result, "changed")


@auth_bp.put("/theme")
@jwt_required()
@csrf_protected
def set_theme():
    payload = request.get_json(silent=True) or {}
    try:
        data = ThemeRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    result = get_storage().identity.set_theme(data.theme, user=get_request_user())
    return result_response(result, "theme")
