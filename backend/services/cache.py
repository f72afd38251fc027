"""Simple in-memory cache for normalized feed items. No Redis needed.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
data may be fetched twice (once per worker). This is acceptable for this
project's scale — the cache still eliminates repeated calls within the
same worker.

Stores are created by the app factory and live as long as the process.
They hold no external resources, so there is nothing to tear down.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: str
    value: tuple[Any, ...]
    created_at: float


class CalendarBucketPolicy:
    """Entries are keyed by month-day and never expire: past days don't change."""

    def is_valid(self, entry: CacheEntry, now: float) -> bool:
        return True

    def __repr__(self) -> str:
        return "CalendarBucketPolicy()"


class TTLPolicy:
    """Entries are valid for a fixed number of seconds after creation."""

    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds

    def is_valid(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl_seconds

    def __repr__(self) -> str:
        return f"TTLPolicy(ttl_seconds={self.ttl_seconds})"


class CacheStore:
    def __init__(self, policy, clock: Callable[[], float] = time.time, name: str = "cache"):
        self.policy = policy
        self.name = name
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        return self._store.get(key)

    def put(self, key: str, items: Iterable[Any]) -> CacheEntry | None:
        """Store items under key, replacing any previous entry.

        Empty lists are not stored, so a transient empty upstream response
        is re-fetched on the next request instead of being pinned.
        """
        value = tuple(items)
        if not value:
            logger.info("%s: not caching empty result for %s", self.name, key)
            return None
        entry = CacheEntry(key=key, value=value, created_at=self._clock())
        self._store[key] = entry
        return entry

    def is_valid(self, entry: CacheEntry, now: float | None = None, policy=None) -> bool:
        if now is None:
            now = self._clock()
        return (policy or self.policy).is_valid(entry, now)

    def get_valid(self, key: str) -> CacheEntry | None:
        entry = self.get(key)
        if entry is not None and self.is_valid(entry):
            return entry
        return None

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store
