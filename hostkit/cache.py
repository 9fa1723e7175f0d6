"""Expiring cache backends (the host's transient facility)."""

from __future__ import annotations

import hashlib
import json
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

Clock = Callable[[], float]


class CacheBackend(ABC):
    """Key-value store whose entries can expire.

    An entry written with a ttl reads as absent once ``clock() >= set_time + ttl``.
    A ttl of zero or less removes the entry.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the live value for ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value``; ``ttl`` is in seconds, ``None`` never expires."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""


class MemoryCache(CacheBackend):
    """Per-process cache; expiry is checked lazily against ``clock``."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._entries: dict[str, tuple[Any, float | None]] = {}
        self._clock = clock

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        if ttl is not None and ttl <= 0:
            self.delete(key)
            return
        expires_at = None if ttl is None else self._clock() + ttl
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class FileCache(CacheBackend):
    """Cache shared between requests through one JSON file per key.

    Each file holds ``{"key", "expires_at", "value"}``. Values must be JSON
    serializable. The directory is created on the first write, so reading an
    empty cache leaves the file system untouched.
    """

    def __init__(self, cache_dir: str | Path, clock: Clock = time.time) -> None:
        self._cache_dir = Path(cache_dir)
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get(self, key: str) -> Any | None:
        path = self._path_for(key)
        try:
            record = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        if not isinstance(record, dict):
            return None

        expires_at = record.get("expires_at")
        if isinstance(expires_at, (int, float)) and self._clock() >= expires_at:
            path.unlink(missing_ok=True)
            return None
        return record.get("value")

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        if ttl is not None and ttl <= 0:
            self.delete(key)
            return

        record = {
            "key": key,
            "expires_at": None if ttl is None else self._clock() + ttl,
            "value": value,
        }
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._path_for(key).write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def clear(self) -> None:
        for path in self._cache_dir.glob("cache_*.json"):
            path.unlink(missing_ok=True)

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._cache_dir / f"cache_{digest}.json"
