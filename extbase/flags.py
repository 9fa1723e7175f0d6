"""Two-tier boolean flag store on top of the host's option store and cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from hostkit.protocols import ExpiringCacheProtocol, OptionStoreProtocol

logger = logging.getLogger(__name__)

FLAG_VALUE = "1"


class FlagScope(str, Enum):
    PERMANENT = "permanent"
    TTL = "ttl"


@dataclass(frozen=True, slots=True)
class PersistedFlag:
    """Description of one flag; the store itself only keeps the boolean."""

    key: str
    scope: FlagScope
    ttl_seconds: float | None = None


class PersistentFlagStore:
    """Permanent flags in the option store, expiring flags in the cache.

    Permanent flags stay set until :meth:`clear` is called. TTL flags read as
    absent from ``set_time + seconds`` on.
    """

    def __init__(self, options: OptionStoreProtocol, cache: ExpiringCacheProtocol) -> None:
        self._options = options
        self._cache = cache

    def set_permanent(self, key: str) -> PersistedFlag:
        if self.is_set(key):
            logger.debug("Permanent flag %s already set", key)
        else:
            self._options.set(key, FLAG_VALUE)
            logger.debug("Set permanent flag %s", key, extra={"flag": key})
        return PersistedFlag(key, FlagScope.PERMANENT)

    def is_set(self, key: str) -> bool:
        return bool(self._options.get(key))

    def clear(self, key: str) -> None:
        self._options.delete(key)
        logger.debug("Cleared permanent flag %s", key, extra={"flag": key})

    def set_ttl(self, key: str, seconds: float) -> PersistedFlag:
        self._cache.set(key, True, ttl=seconds)
        logger.debug("Set flag %s for %ss", key, seconds, extra={"flag": key})
        return PersistedFlag(key, FlagScope.TTL, seconds)

    def is_ttl_active(self, key: str) -> bool:
        return bool(self._cache.get(key))

    def clear_ttl(self, key: str) -> None:
        self._cache.delete(key)
