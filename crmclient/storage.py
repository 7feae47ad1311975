import json
from typing import Any, Dict, Optional
from js import console

from crmclient.utils.runtime import is_server_side

if is_server_side:
    localStorage = None
    sessionStorage = None
else:
    from js import localStorage, sessionStorage


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class MemoryStorage:
    """In-memory storage engine implementation."""
    def __init__(self):
        self._storage: Dict[str, Any] = {}
    def save(self, key: str, data: Any) -> None:
        self._storage[key] = data
    def load(self, key: str) -> Optional[Any]:
        return self._storage.get(key)
    def remove(self, key: str) -> None:
        self._storage.pop(key, None)
    def clear(self) -> None:
        self._storage.clear()


class BrowserStorage:
    """
        Key/value persistence on top of a Web Storage target (localStorage or sessionStorage).
        Falls back to MemoryStorage when no target is available.
    """

    def __init__(self, storage_target, description: str, raw: bool = False):
        # raw: values are plain strings written with setItem as-is, no JSON envelope
        self.raw = raw
        if is_server_side:
            self._storage = MemoryStorage()
            self.description = f"{description} (Memory Fallback)"
        elif storage_target:
            self._storage = storage_target
            self.description = description
        else:
            self._storage = MemoryStorage()
            self.description = f"{description} (Memory Fallback - Target Missing)"

    @property
    def is_memory(self) -> bool:
        return isinstance(self._storage, MemoryStorage)

    def save(self, key: str, data: Any) -> None:
        if self.is_memory:
            self._storage.save(key, data)
            return
        try:
            if self.raw:
                self._storage.setItem(key, str(data))
            else:
                self._storage.setItem(key, json.dumps({"data": data}))
        except Exception as e:
            raise StorageError(f"Error saving to {self.description}: {e}") from e

    def load(self, key: str) -> Optional[Any]:
        if self.is_memory:
            return self._storage.load(key)
        try:
            value_json = self._storage.getItem(key)
            if not value_json:
                return None
            if self.raw:
                return str(value_json)
            value = json.loads(value_json)
            if not isinstance(value, dict):
                return None
            return value.get("data")
        except json.JSONDecodeError:
            console.warn(f"Could not decode JSON from {self.description} for key '{key}'. Clearing item.")
            self.remove(key)
            return None
        except Exception as e:
            raise StorageError(f"Error loading from {self.description}: {e}") from e

    def remove(self, key: str) -> None:
        if self.is_memory:
            self._storage.remove(key)
            return
        try:
            self._storage.removeItem(key)
        except Exception as e:
            raise StorageError(f"Error removing key '{key}' from {self.description}: {e}") from e


session_storage = BrowserStorage(sessionStorage, "session_storage")
local_storage = BrowserStorage(localStorage, "local_storage")
raw_local_storage = BrowserStorage(localStorage, "local_storage", raw=True)
