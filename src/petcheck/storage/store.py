"""
Key-value store abstraction for per-user application state.

Values must be JSON-compatible. Stores are last-writer-wins within a single
process; no cross-process coordination is provided.
"""

import copy
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator

from petcheck.core.exceptions import StorageError
from petcheck.core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Abstract key-value store."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a copy of the value stored under key, or default."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under key, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if the key existed.
        """
        ...

    @abstractmethod
    def keys(self, prefix: str = "") -> Iterator[str]:
        """Iterate over keys starting with prefix."""
        ...

    def __contains__(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store, lost when the process exits."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def keys(self, prefix: str = "") -> Iterator[str]:
        return iter([k for k in self._data if k.startswith(prefix)])

    def snapshot(self) -> dict[str, Any]:
        """Get a deep copy of the whole store."""
        return copy.deepcopy(self._data)


class JSONFileStore(InMemoryStore):
    """
    Store persisted to a single JSON file.

    The file is read once at construction and rewritten after every change.
    An unreadable file is logged and the store starts empty.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading data from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring {self.path}: expected a JSON object")
            return {}
        logger.info(f"Loaded {len(data)} keys from {self.path}")
        return data

    def _save(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, default=str)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Error saving data: {e}", {"path": str(self.path)}) from e

    def set(self, key: str, value: Any) -> None:
        existed = key in self._data
        previous = self._data.get(key)
        super().set(key, value)
        try:
            self._save()
        except StorageError:
            # Memory must keep matching the file after a failed write
            if existed:
                self._data[key] = previous
            else:
                del self._data[key]
            raise

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        previous = self._data.pop(key)
        try:
            self._save()
        except StorageError:
            self._data[key] = previous
            raise
        return True
