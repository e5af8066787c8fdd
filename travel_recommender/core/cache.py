"""Process-local TTL cache used by the fact engine."""
from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_WEATHER_LIVE = 60 * 60             # 1 hour
TTL_WEATHER_FALLBACK = 12 * 60 * 60    # 12 hours
TTL_HOTELS = 6 * 60 * 60               # 6 hours


class TTLCache(Protocol):
    """Key/value store whose entries expire after a per-entry TTL.

    ``get`` returns a non-expired value or ``None``; ``set`` is idempotent for
    identical keys and values.
    """

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_s: float) -> None: ...


class InMemoryTTLCache:
    """Bounded in-memory cache. Entries are never mutated once written."""

    def __init__(
        self,
        *,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            self._entries.pop(key, None)
            logger.debug(f"Cache expired: {key}")
            return None
        return value

    def set(self, key: str, value: Any, ttl_s: float) -> None:
        self._entries[key] = (self._clock() + ttl_s, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache evicted: {evicted}")

    def clear(self) -> None:
        self._entries.clear()
