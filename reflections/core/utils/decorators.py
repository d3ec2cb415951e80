"""Reusable decorators for controllers/services."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify, request

from reflections.core.auth.csrf import validate_csrf_token
from reflections.core.results import ServiceResult

F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def service_operation(action: str):
    """Translate any failure inside a service method into a failed result.

    The owning object may define ``_rollback()`` to undo partial work before
    the failure is reported.
    """

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(self, *args, **kwargs):  # type: ignore[misc]
            try:
                return fn(self, *args, **kwargs)
            except Exception as exc:
                rollback = getattr(self, "_rollback", None)
                if rollback is not None:
                    try:
                        rollback()
                    except Exception:
                        logger.exception("Rollback failed after error %s", action)
                logger.exception("Error %s", action)
                return ServiceResult.fail(f"Error {action}: {exc}")

        return wrapper  # type: ignore[return-value]

    return decorator


def csrf_protected(fn: F) -> F:
    """Validate CSRF token from header X-CSRF-Token."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        token = request.headers.get("X-CSRF-Token")
        if not validate_csrf_token(token or ""):
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
