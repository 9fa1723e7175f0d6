"""Durable key/value option stores (the host's options table)."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .exceptions import OptionStoreError, wrap_exception


class OptionStore(ABC):
    """Abstract durable option store. Values never expire."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key`` or ``default``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""

    def has(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryOptionStore(OptionStore):
    """Process-local option store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonOptionStore(OptionStore):
    """Option store persisted as one JSON object on disk.

    The file is re-read on every access so that concurrent processes see each
    other's writes (last write wins). A file that does not hold a JSON object
    raises :class:`OptionStoreError` on every access, writes included, and is
    left as found.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def keys(self) -> list[str]:
        return sorted(self._read())

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        context = {"path": str(self._path)}
        try:
            obj = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise wrap_exception(
                exc, OptionStoreError, f"Cannot read option file {self._path}", context=context
            ) from exc
        if not isinstance(obj, dict):
            raise OptionStoreError(
                f"Option file {self._path} does not hold a JSON object", context=context
            )
        return obj

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
