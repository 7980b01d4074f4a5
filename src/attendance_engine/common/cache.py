from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from datetime import date
from typing import Any, Callable, Dict, NamedTuple, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheKey(NamedTuple):
    employee_id: int
    start: date
    end: date

    def covers(self, employee_id: int, on_date: date) -> bool:
        return self.employee_id == employee_id and self.start <= on_date <= self.end


class ReadThroughCache:
    """Process-wide cache of computed attendance, keyed by (employee, date range).

    Entries are served for at most ``ttl_seconds`` (the staleness window) and
    dropped early by ``invalidate`` when a punch for a covered day arrives.
    A ``ttl_seconds`` of 0 disables caching. Loader errors are never cached.
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: Dict[CacheKey, Tuple[float, Any]] = {}
        # Bumped on invalidation so a load that raced with it is not stored.
        self._generations: Dict[int, int] = defaultdict(int)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get_or_load(self, key: CacheKey, loader: Callable[[], T]) -> T:
        if self._ttl <= 0:
            return loader()

        with self._lock:
            hit = self._entries.get(key)
            if hit is not None and self._clock() - hit[0] < self._ttl:
                logger.debug("Cache hit %s", key)
                return hit[1]
            generation = self._generations[key.employee_id]

        logger.debug("Cache miss %s", key)
        value = loader()

        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            if self._generations[key.employee_id] == generation:
                self._entries[key] = (now, value)
        return value

    def _evict_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self._ttl]
        for k in expired:
            del self._entries[k]

    def invalidate(self, employee_id: int, on_date: date) -> int:
        """Drop every entry of ``employee_id`` whose range contains ``on_date``."""

        with self._lock:
            self._generations[employee_id] += 1
            stale = [k for k in self._entries if k.covers(employee_id, on_date)]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.debug("Invalidated %d cache entries for employee_id=%s on %s", len(stale), employee_id, on_date)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for employee_id in list(self._generations):
                self._generations[employee_id] += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
