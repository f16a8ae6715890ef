"""Key-value backends holding site metadata and site secrets.

Values are strings. Site metadata and credentials are kept in two
separate stores so that secrets never land in the plain metadata file.
"""
from __future__ import annotations

import base64
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; contents are lost when the object goes away."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStore:
    """Store persisted as a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open() as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.error("Failed to read key-value file %s", self.path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring key-value file %s: top level is not an object", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as f:
            json.dump(data, f, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


def derive_fernet_key(seed: str) -> bytes:
    """Turn a passphrase into a Fernet key (first 32 bytes, space padded)."""
    return base64.urlsafe_b64encode(seed.encode().ljust(32)[:32])


class EncryptedFileStore(JsonFileStore):
    """JSON file store whose values are encrypted with Fernet.

    Changing the key makes existing values unreadable; they are then
    reported as absent.
    """

    def __init__(self, path: str | Path, key: bytes | str) -> None:
        super().__init__(path)
        self._fernet = Fernet(key)

    def get_item(self, key: str) -> Optional[str]:
        token = super().get_item(key)
        if token is None:
            return None
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken:
            logger.error("Cannot decrypt value for %r; the encryption key may have changed", key)
            return None

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, self._fernet.encrypt(value.encode()).decode())
