"""Baidu Baike "events on history" adapter.

Upstream publishes one JSON file per month, nested as
{"MM": {"MMDD": [event, ...]}}. Events carry HTML markup and numeric
character references in title/desc, which are cleaned up here.
"""

import logging
import re
from typing import Any, Awaitable, Callable

import pandas as pd

from config import settings
from errors import InvalidDateError, SchemaError
from services.http_client import fetch_json
from services.models import HistoryDay, HistoryEvent

logger = logging.getLogger(__name__)

HISTORY_API_URL = "https://baike.baidu.com/cms/home/eventsOnHistory/{month:02d}.json"

EVENT_TYPES = {"birth", "death", "event"}

_TAG_RE = re.compile(r"<.*?>")
_ENTITY_RE = re.compile(r"&#(\d+);")
_YEAR_RE = re.compile(r"-?\d+")


def sanitize(text: str) -> str:
    """Strip HTML tags and decode numeric character references (&#20013; -> 中)."""
    text = _TAG_RE.sub("", text)
    return _ENTITY_RE.sub(_decode_entity, text)


def _decode_entity(match: re.Match) -> str:
    code = int(match.group(1))
    if code > 0x10FFFF:
        return match.group(0)
    return chr(code)


def ensure_terminator(text: str) -> str:
    if text.endswith(".") or text.endswith("。"):
        return text
    return text + "..."


def year_sort_key(year: Any) -> int:
    """Years are strings upstream but must order numerically (BC years are negative)."""
    if isinstance(year, int):
        return year
    match = _YEAR_RE.search(str(year or ""))
    return int(match.group(0)) if match else 0


class HistoryAdapter:
    """Fetches and normalizes the events that happened on a given month-day."""

    name = "today_in_history"

    def __init__(
        self,
        fetch: Callable[..., Awaitable[Any]] = fetch_json,
        timezone: str | None = None,
        strict: bool | None = None,
    ):
        self._fetch = fetch
        self.timezone = timezone or settings.timezone
        self.strict = settings.strict_upstream_schema if strict is None else strict

    def resolve_day(self, value: str | None = None) -> HistoryDay:
        """Turn an optional ISO-ish date string into a month-day.

        Missing values mean "today" in the reference timezone. Naive values
        are read as wall time in that timezone.
        """
        if not value:
            now = pd.Timestamp.now(tz=self.timezone)
            return HistoryDay(month=now.month, day=now.day)

        try:
            ts = pd.Timestamp(value)
        except (ValueError, TypeError) as e:
            raise InvalidDateError(value) from e
        if pd.isna(ts):
            raise InvalidDateError(value)

        if ts.tzinfo is None:
            ts = ts.tz_localize(self.timezone)
        else:
            ts = ts.tz_convert(self.timezone)
        return HistoryDay(month=ts.month, day=ts.day)

    def cache_key(self, day: HistoryDay) -> str:
        return day.date

    def url_for(self, month: int) -> str:
        return HISTORY_API_URL.format(month=month)

    async def fetch_raw(self, day: HistoryDay) -> Any:
        return await self._fetch(self.url_for(day.month))

    def normalize(self, raw: Any, day: HistoryDay) -> list[HistoryEvent]:
        url = self.url_for(day.month)
        if not isinstance(raw, dict):
            return self._drift(url, f"expected an object, got {type(raw).__name__}")

        month_bucket = raw.get(day.month_code)
        if month_bucket is None:
            return []
        if not isinstance(month_bucket, dict):
            return self._drift(url, f"month {day.month_code} is not an object")

        records = month_bucket.get(day.day_code)
        if records is None:
            logger.info("No historical events recorded for %s", day.date)
            return []
        if not isinstance(records, list):
            return self._drift(url, f"day {day.day_code} is not a list")

        events = [r for r in records if isinstance(r, dict)]
        if len(events) != len(records):
            logger.warning("Skipped %d malformed events for %s", len(records) - len(events), day.date)

        events.sort(key=lambda r: year_sort_key(r.get("year")))
        return [self._to_event(r, day) for r in events]

    def _to_event(self, raw: dict, day: HistoryDay) -> HistoryEvent:
        event_type = raw.get("type")
        return HistoryEvent(
            title=sanitize(str(raw.get("title") or "")),
            year=str(raw.get("year") or ""),
            date=day.date,
            description=ensure_terminator(sanitize(str(raw.get("desc") or ""))),
            event_type=event_type if event_type in EVENT_TYPES else "event",
            link=str(raw.get("link") or ""),
        )

    def _drift(self, url: str, reason: str) -> list:
        if self.strict:
            raise SchemaError(url, reason)
        logger.warning("Unexpected history payload from %s (%s); treating as empty", url, reason)
        return []
