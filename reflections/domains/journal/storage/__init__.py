"""Journal storage backends and the factory that picks one from config."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from flask import Flask

from reflections.core.auth.identity import IdentityDirectory
from reflections.core.auth.secure_store import FileSecureStore, MemorySecureStore
from reflections.domains.journal.storage.base import StorageService
from reflections.domains.journal.storage.database import DatabaseStorageService
from reflections.domains.journal.storage.file import FileStorageService

BACKENDS = ("database", "file")


def _resolve_path(app: Flask, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = Path(app.root_path).parent / path
    return path


def build_identity(app: Flask) -> IdentityDirectory:
    store_file = app.config.get("SECURE_STORE_FILE")
    store = FileSecureStore(_resolve_path(app, store_file)) if store_file else MemorySecureStore()
    ttl_hours = app.config.get("TOKEN_TTL_HOURS")
    return IdentityDirectory(
        secure_store=store,
        token_ttl=timedelta(hours=int(ttl_hours)) if ttl_hours else None,
    )


def build_storage(app: Flask, identity: IdentityDirectory | None = None) -> StorageService:
    """Instantiate the backend named by ``STORAGE_BACKEND``."""
    backend = (app.config.get("STORAGE_BACKEND") or "database").lower()
    identity = identity if identity is not None else build_identity(app)
    lookback = int(app.config.get("STREAK_LOOKBACK_DAYS", 365))
    if backend == "database":
        return DatabaseStorageService(identity=identity, streak_lookback_days=lookback)
    if backend == "file":
        data_dir = _resolve_path(app, app.config.get("DATA_DIR", "instance/data"))
        return FileStorageService(data_dir, identity=identity, streak_lookback_days=lookback)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}")


__all__ = [
    "BACKENDS",
    "DatabaseStorageService",
    "FileStorageService",
    "StorageService",
    "build_identity",
    "build_storage",
]
