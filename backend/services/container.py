"""Service wiring: one cache store and pipeline per feed, owned by the app."""

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fastapi import Request

from config import Settings
from services.cache import CacheStore, CalendarBucketPolicy, TTLPolicy
from services.douban import DoubanWeeklyAdapter
from services.history import HistoryAdapter
from services.http_client import fetch_json
from services.pipeline import FeedPipeline


@dataclass
class ServiceContainer:
    history: FeedPipeline
    douban: FeedPipeline

    def cache_sizes(self) -> dict[str, int]:
        return {
            "today_in_history": len(self.history.store),
            "douban_weekly": len(self.douban.store),
        }


def build_services(
    settings: Settings,
    fetch: Callable[..., Awaitable[Any]] = fetch_json,
    clock: Callable[[], float] = time.time,
) -> ServiceContainer:
    history_adapter = HistoryAdapter(
        fetch=fetch,
        timezone=settings.timezone,
        strict=settings.strict_upstream_schema,
    )
    douban_adapter = DoubanWeeklyAdapter(
        fetch=fetch,
        proxy_host=settings.cover_proxy_host,
        strict=settings.strict_upstream_schema,
    )
    return ServiceContainer(
        history=FeedPipeline(
            history_adapter,
            CacheStore(CalendarBucketPolicy(), clock=clock, name="today_in_history"),
            single_flight=settings.single_flight,
        ),
        douban=FeedPipeline(
            douban_adapter,
            CacheStore(TTLPolicy(settings.ranking_cache_ttl_seconds), clock=clock, name="douban_weekly"),
            single_flight=settings.single_flight,
        ),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
