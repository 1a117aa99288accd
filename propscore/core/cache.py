"""
TTL Cache Stores
================
Key-value cache abstraction injected into the game-log store and the token
provider. Entries carry their write time and TTL; a read at or past the TTL
drops the entry and reports a miss.

Usage:
    from propscore.core.cache import MemoryCache

    cache = MemoryCache()
    cache.set("player_gamelogs_265_2025", logs, ttl=3600)
    logs = cache.get("player_gamelogs_265_2025")
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A stored value plus its write timestamp and lifetime (seconds)."""

    value: Any
    written_at: float
    ttl: float

    def is_stale(self, now: float) -> bool:
        return now - self.written_at >= self.ttl

    def age(self, now: float) -> float:
        return now - self.written_at


class CacheStore:
    """Cache interface: get / set(ttl) / invalidate / clear."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: float) -> None:
        raise NotImplementedError

    def invalidate(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryCache(CacheStore):
    """
    In-process TTL cache.

    Writes replace whole values, so concurrent readers see either the old or
    the new entry. The clock is injectable so staleness can be tested without
    sleeping.

    Args:
        clock: Callable returning seconds (default: time.monotonic)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.is_stale(self._clock()):
                self._data.pop(key, None)
                return None
            return entry

    def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            return
        entry = CacheEntry(value=value, written_at=self._clock(), ttl=ttl)
        with self._lock:
            self._data[key] = entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
