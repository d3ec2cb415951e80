"""Helpers shared by the JSON controllers."""

from __future__ import annotations

from typing import Any, Callable, Optional

from flask import current_app, jsonify
from flask_jwt_extended import get_jwt_identity
from pydantic import ValidationError

from reflections.core.results import NOT_AUTHENTICATED, ServiceResult


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        err.pop("url", None)
    return errors


def validation_error(exc: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400


def get_storage():
    """The journal storage facade attached by the app factory."""
    return current_app.extensions["storage"]


def get_request_user():
    """Resolve the JWT subject of the current request to an active user (or None)."""
    return get_storage().identity.get_user(get_jwt_identity())


def status_for(result: ServiceResult) -> int:
    error = (result.error or "").lower()
    if result.error == NOT_AUTHENTICATED:
        return 401
    if "not found" in error:
        return 404
    return 400


def result_response(
    result: ServiceResult,
    key: str,
    serialize: Optional[Callable[[Any], Any]] = None,
    status: int = 200,
):
    """Render a ServiceResult using the ``{"ok": ..}`` envelope."""
    if not result.success:
        return jsonify({"ok": False, "error": result.error}), status_for(result)
    data = serialize(result.data) if serialize is not None else result.data
    return jsonify({"ok": True, key: data}), status
