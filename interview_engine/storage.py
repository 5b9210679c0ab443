"""
Key-Value Store Backends.

Generic string-keyed persistence used by the session store, the profile
store and the candidate repository. Values are JSON documents. Reads are
tolerant: a missing key, an unreadable file or invalid JSON all return the
caller's default instead of raising.

Thread Safety:
    InMemoryKeyValueStore guards its dict with a lock. JsonFileKeyValueStore
    writes atomically (temp file + replace) but does not lock across a
    read-modify-write; callers serialize that themselves (the engine does).

Last Grunted: 10/17/2026
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional, Protocol


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "StoreWriteError",
]


logger = logging.getLogger(__name__)


class StoreWriteError(Exception):
    """Raised when a value cannot be written to or removed from disk."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write to {path}: {cause}")


class KeyValueStore(Protocol):
    """Minimal persistence contract: get with default, set, remove."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """
    Process-local store holding JSON-encoded values.

    Values are encoded on set and decoded on get, so callers never share
    mutable objects with the store and corrupt entries behave exactly as
    they would on disk.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            raw = self._values.get(key)
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt value for key %s", key)
            return default
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._values[key] = encoded

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


class JsonFileKeyValueStore:
    """
    Stores each key as ``{key}.json`` inside a data directory.

    Example:
        >>> store = JsonFileKeyValueStore(Path("./data"))
        >>> store.set("ai_profile", {"name": "Ada"})
        >>> store.get("ai_profile")
        {'name': 'Ada'}
    """

    def __init__(self, data_dir: Path) -> None:
        """
        Initialize the file store.

        Args:
            data_dir: Directory holding the JSON files. Created if it doesn't exist.

        Raises:
            StoreWriteError: If the directory cannot be created.
        """
        self.data_dir = Path(data_dir)
        self._ensure_data_dir()

    def _ensure_data_dir(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.debug("Data directory ready: %s", self.data_dir)
        except OSError as e:
            raise StoreWriteError(self.data_dir, e) from e

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read and decode a value.

        Returns:
            The decoded value, or ``default`` if the file is missing,
            unreadable, not valid UTF-8, holds invalid JSON or holds JSON null.
        """
        path = self._path_for(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable value at %s: %s", path, e)
            return default

        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Encode and write a value, replacing any previous file atomically.

        Raises:
            StoreWriteError: If the file cannot be written.
        """
        path = self._path_for(key)
        self._ensure_data_dir()
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.data_dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StoreWriteError(path, e) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug("Wrote %s", path)

    def remove(self, key: str) -> None:
        """
        Delete a key. Missing keys are ignored.

        Raises:
            StoreWriteError: If the file exists but cannot be deleted.
        """
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreWriteError(path, e) from e
