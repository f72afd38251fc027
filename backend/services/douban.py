"""Douban weekly word-of-mouth charts adapter.

The rexxar mobile API rejects requests that don't look like they come from
a mobile browser, hence the fixed User-Agent and Referer.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from config import settings
from errors import SchemaError, UnsupportedCategoryError
from services.http_client import fetch_json
from services.models import RankedItem

logger = logging.getLogger(__name__)

DOUBAN_BASE_URL = "https://m.douban.com/rexxar/api/v2/subject_collection"
DOUBAN_REFERER = "https://m.douban.com/subject_collection"
DOUBAN_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)

_COVER_HOST_RE = re.compile(r"https://img\w*\.doubanio\.com")


@dataclass(frozen=True, slots=True)
class Category:
    key: str
    collection: str
    title: str
    emoji: str


CATEGORIES = {
    "movie": Category("movie", "movie_weekly_best", "一周口碑电影榜", "🎬"),
    "tv_chinese": Category("tv_chinese", "tv_chinese_best_weekly", "一周口碑国内剧集榜", "📺"),
    "tv_global": Category("tv_global", "tv_global_best_weekly", "一周口碑全球剧集榜", "🌍"),
    "show_chinese": Category("show_chinese", "show_chinese_best_weekly", "一周口碑国内综艺榜", "🎤"),
    "show_global": Category("show_global", "show_global_best_weekly", "一周口碑全球综艺榜", "🌍"),
}


def get_category(key: str) -> Category:
    category = CATEGORIES.get(key)
    if category is None:
        raise UnsupportedCategoryError(key, CATEGORIES.keys())
    return category


def proxy_cover_url(url: str, proxy_host: str | None = None) -> str:
    """Point doubanio image hosts (img1, img3, ...) at the image proxy."""
    return _COVER_HOST_RE.sub(proxy_host or settings.cover_proxy_host, url, count=1)


def derive_trend(raw: dict) -> str:
    if raw.get("trend_up"):
        return "up"
    if raw.get("trend_down"):
        return "down"
    return "equal"


def _dedupe_tags(tags: Any) -> tuple[str, ...]:
    if not isinstance(tags, list):
        return ()
    names = (t.get("name") if isinstance(t, dict) else None for t in tags)
    return tuple(dict.fromkeys(n for n in names if isinstance(n, str) and n))


def _number(value: Any, cast, default=0):
    if isinstance(value, bool) or value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def transform_item(raw: dict, proxy_host: str | None = None) -> RankedItem:
    """Map one raw subject_collection item to a RankedItem.

    Optional fields fall back to 0 / "" / [] when absent.
    """
    rating = raw.get("rating") if isinstance(raw.get("rating"), dict) else {}
    cover_url = str(raw.get("cover_url") or "")
    return RankedItem(
        rank=_number(raw.get("rank"), int),
        title=str(raw.get("title") or ""),
        id=str(raw.get("id") or ""),
        rating=max(_number(rating.get("value"), float, 0.0), 0.0),
        rating_count=max(_number(rating.get("count"), int), 0),
        good_rate=_number(raw.get("good_rating_stats"), float, 0.0),
        trend=derive_trend(raw),
        rank_change=_number(raw.get("rank_value_changed"), int),
        subtitle=str(raw.get("card_subtitle") or ""),
        description=str(raw.get("description") or ""),
        cover_url=cover_url,
        cover_url_proxied=proxy_cover_url(cover_url, proxy_host),
        url=str(raw.get("url") or ""),
        tags=_dedupe_tags(raw.get("tags")),
    )


class DoubanWeeklyAdapter:
    """Fetches and normalizes a Douban weekly chart for one category."""

    name = "douban_weekly"

    def __init__(
        self,
        fetch: Callable[..., Awaitable[Any]] = fetch_json,
        proxy_host: str | None = None,
        strict: bool | None = None,
    ):
        self._fetch = fetch
        self.proxy_host = proxy_host or settings.cover_proxy_host
        self.strict = settings.strict_upstream_schema if strict is None else strict

    def cache_key(self, category: str) -> str:
        return get_category(category).key

    def url_for(self, category: str) -> str:
        collection = get_category(category).collection
        return f"{DOUBAN_BASE_URL}/{collection}/items?start=0&count=10&items_only=1&for_mobile=1"

    async def fetch_raw(self, category: str) -> Any:
        headers = {"User-Agent": DOUBAN_UA, "Referer": DOUBAN_REFERER}
        return await self._fetch(self.url_for(category), headers)

    def normalize(self, raw: Any, category: str) -> list[RankedItem]:
        url = self.url_for(category)
        if not isinstance(raw, dict):
            return self._drift(url, f"expected an object, got {type(raw).__name__}")

        records = raw.get("subject_collection_items")
        if records is None:
            return []
        if not isinstance(records, list):
            return self._drift(url, "subject_collection_items is not a list")

        items = [transform_item(r, self.proxy_host) for r in records if isinstance(r, dict)]
        if len(items) != len(records):
            logger.warning("Skipped %d malformed %s items", len(records) - len(items), category)

        items.sort(key=lambda item: item.rank)
        return items

    def _drift(self, url: str, reason: str) -> list:
        if self.strict:
            raise SchemaError(url, reason)
        logger.warning("Unexpected Douban payload from %s (%s); treating as empty", url, reason)
        return []
