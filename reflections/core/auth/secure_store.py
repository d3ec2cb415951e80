"""Key-value stores for session material kept outside the journal storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class SecureStore(Protocol):
    """Interface for persisting small secrets such as the session token."""

    def set(self, key: str, value: str) -> None:
        ...

    def get(self, key: str) -> Optional[str]:
        ...

    def remove(self, key: str) -> None:
        ...

    def exists(self, key: str) -> bool:
        ...


class MemorySecureStore:
    """Process-local store; nothing survives a restart."""

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._values


class FileSecureStore:
    """
    JSON file store readable only by the owning user.

    The whole mapping is rewritten on every change.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            logger.warning("Secure store %s is unreadable; treating it as empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values))
        self.path.chmod(0o600)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def remove(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)

    def exists(self, key: str) -> bool:
        return key in self._read()
