"""Cache-fronted fetch-and-normalize pipeline.

Per request: check cache -> (hit: done) | (miss: fetch -> normalize -> store).
A FetchError aborts the request before anything is stored, and nothing is
retried here. Empty results are returned but never stored.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from services.cache import CacheStore

logger = logging.getLogger(__name__)

P = TypeVar("P")


class SourceAdapter(Protocol[P]):
    name: str

    def cache_key(self, param: P) -> str: ...

    async def fetch_raw(self, param: P) -> Any: ...

    def normalize(self, raw: Any, param: P) -> list: ...


@dataclass(frozen=True, slots=True)
class FeedResult:
    key: str
    items: tuple
    from_cache: bool


class FeedPipeline(Generic[P]):
    """Serves one source through one cache store.

    With single_flight enabled, concurrent misses for the same key wait on a
    per-key lock so only one of them reaches the upstream. Without it,
    duplicate fetches may happen and the last write wins, which is harmless
    because normalization is pure.
    """

    def __init__(self, adapter: SourceAdapter[P], store: CacheStore, single_flight: bool = True):
        self.adapter = adapter
        self.store = store
        self.single_flight = single_flight
        self._locks: dict[str, asyncio.Lock] = {}

    async def get(self, param: P) -> FeedResult:
        key = self.adapter.cache_key(param)

        cached = self._lookup(key)
        if cached is not None:
            return cached

        if not self.single_flight:
            return await self._refresh(key, param)

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another request may have filled the cache while we waited.
            cached = self._lookup(key)
            if cached is not None:
                return cached
            return await self._refresh(key, param)

    def _lookup(self, key: str) -> FeedResult | None:
        entry = self.store.get(key)
        if entry is None:
            return None
        if not self.store.is_valid(entry):
            logger.debug("%s: cache entry for %s expired", self.adapter.name, key)
            return None
        logger.debug("%s: cache hit for %s", self.adapter.name, key)
        return FeedResult(key=key, items=entry.value, from_cache=True)

    async def _refresh(self, key: str, param: P) -> FeedResult:
        logger.info("%s: cache miss for %s, fetching upstream", self.adapter.name, key)
        raw = await self.adapter.fetch_raw(param)
        items = self.adapter.normalize(raw, param)

        entry = self.store.put(key, items)
        if entry is not None:
            logger.info("%s: cached %d items for %s", self.adapter.name, len(entry.value), key)
            return FeedResult(key=key, items=entry.value, from_cache=False)
        return FeedResult(key=key, items=tuple(items), from_cache=False)
