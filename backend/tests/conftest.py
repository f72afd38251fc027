import asyncio
from typing import Any

import pytest

from errors import FetchError

MARCH_14_PAYLOAD = {
    "03": {
        "0314": [
            {
                "title": "<a href='/item/x'>海湾战争</a>结束",
                "year": "1990",
                "desc": "<b>海湾战争</b>相关事件&#12290;",
                "type": "event",
                "link": "https://baike.baidu.com/item/1990",
            },
            {
                "title": "某人出生",
                "year": "1200",
                "desc": "A <b>bold</b> word &#20013;",
                "type": "birth",
                "link": "https://baike.baidu.com/item/1200",
            },
            {
                "title": "某人逝世",
                "year": "1500",
                "desc": "Something happened.",
                "type": "death",
                "link": "https://baike.baidu.com/item/1500",
            },
        ],
        "0315": [],
    }
}


def raw_douban_item(rank: int, **overrides: Any) -> dict:
    item = {
        "rank": rank,
        "rank_value_changed": 0,
        "trend_up": False,
        "trend_down": False,
        "title": f"Title {rank}",
        "id": str(1000 + rank),
        "rating": {"value": 8.5, "count": 1200},
        "card_subtitle": "2024 / 中国大陆 / 剧情",
        "description": "",
        "cover_url": f"https://img{rank}.doubanio.com/view/photo/{rank}.jpg",
        "url": f"https://m.douban.com/movie/subject/{1000 + rank}/",
        "good_rating_stats": 90.5,
        "tags": [{"name": "剧情", "type": "genre"}],
    }
    item.update(overrides)
    return item


class FakeFetch:
    """Stand-in for services.http_client.fetch_json that records calls."""

    def __init__(self, payload: Any = None, error: Exception | None = None, delay: float = 0):
        self.payload = payload
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, dict | None]] = []

    async def __call__(self, url: str, headers: dict | None = None) -> Any:
        self.calls.append((url, headers))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history_fetch() -> FakeFetch:
    return FakeFetch(MARCH_14_PAYLOAD)


@pytest.fixture
def douban_fetch() -> FakeFetch:
    return FakeFetch({"subject_collection_items": [raw_douban_item(3), raw_douban_item(1), raw_douban_item(2)]})


@pytest.fixture
def failing_fetch() -> FakeFetch:
    return FakeFetch(error=FetchError("https://example.test", "HTTP 503"))
