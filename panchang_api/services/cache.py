"""Process-local TTL cache with LRU eviction.

Endpoints run in FastAPI's threadpool, so every operation takes the lock.
"""

from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


def _ttl_seconds() -> float:
    return float(os.getenv("PANCHANG_CACHE_TTL_SECONDS", "3600"))


def _max_entries() -> int:
    return max(1, int(os.getenv("PANCHANG_CACHE_MAX_ENTRIES", "128")))


class TTLCache(Generic[V]):
    """Bounded mapping whose entries expire after a per-entry TTL."""

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = _max_entries() if max_entries is None else max(1, max_entries)
        self.ttl = _ttl_seconds() if ttl is None else ttl
        self._clock = clock
        self._data: "OrderedDict[Hashable, Tuple[float, V]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._data[key]
                return None
            self._data.move_to_end(key)
            return value

    def put_with_expiry(self, key: Hashable, value: V, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + (self.ttl if ttl is None else ttl)
        with self._lock:
            self._data[key] = (expires_at, value)
            self._data.move_to_end(key)
            self._purge_expired()
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (exp, _) in self._data.items() if exp <= now]:
            del self._data[key]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None
