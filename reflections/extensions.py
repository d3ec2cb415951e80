"""Flask extension singletons for Reflections.

Modules import these directly (``from reflections.extensions import db``);
they are bound to an app in ``init_extensions``.
"""

import sqlite3
from pathlib import Path

from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# Rows stay readable after commit; services map them to DTOs post-write.
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
jwt = JWTManager()
bcrypt = Bcrypt()
# Configured from the RATELIMIT_* keys at init_app time.
limiter = Limiter(key_func=get_remote_address)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _sqlite_unicode_lower(dbapi_connection, connection_record):
    """Replace SQLite's ASCII-only ``lower()`` with Python's.

    ``func.lower`` comparisons and ``ilike`` (rendered as ``lower() LIKE
    lower()`` on SQLite) then fold case the same way ``str.lower`` does.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def init_extensions(app) -> None:
    db.init_app(app)
    migrate.init_app(app, db, directory=str(MIGRATIONS_DIR))
    jwt.init_app(app)
    bcrypt.init_app(app)
    limiter.init_app(app)
