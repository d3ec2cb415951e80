"""Reflections application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask

from reflections.config import config_by_name
from reflections.extensions import init_extensions


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Reflections Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)
    logging.getLogger(__name__).setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _init_storage(app)

    @app.get("/health")
    def health():
        return {"ok": True, "backend": app.extensions["storage"].backend_name}, 200

    return app


def _init_storage(app: Flask) -> None:
    """Build the configured journal backend and prepare its schema.

    Failures propagate: an app without working storage should not start.
    """
    from reflections.domains.journal.storage import build_storage

    storage = build_storage(app)
    with app.app_context():
        storage.initialize()
    app.extensions["storage"] = storage
    app.logger.info("Journal storage ready (%s backend)", storage.backend_name)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from reflections.core.auth.controllers import auth_bp  # local import to avoid circulars
    from reflections.domains.journal.controllers.journal_api import journal_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
