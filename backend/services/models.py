"""Normalized item shapes shared by adapters, cache and renderer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Literal

EventType = Literal["birth", "death", "event"]
Trend = Literal["up", "down", "equal"]


@dataclass(frozen=True, slots=True)
class HistoryEvent:
    """One "this day in history" record."""

    title: str
    year: str
    date: str
    description: str
    event_type: EventType
    link: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RankedItem:
    """One entry of a weekly ranking chart."""

    rank: int
    title: str
    id: str
    rating: float
    rating_count: int
    good_rate: float
    trend: Trend
    rank_change: int
    subtitle: str
    description: str
    cover_url: str
    cover_url_proxied: str
    url: str
    tags: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data


@dataclass(frozen=True, slots=True)
class HistoryDay:
    """A calendar day without a year; all years share the same history."""

    month: int
    day: int

    @property
    def date(self) -> str:
        return f"{self.month}-{self.day}"

    @property
    def month_code(self) -> str:
        return f"{self.month:02d}"

    @property
    def day_code(self) -> str:
        return f"{self.month:02d}{self.day:02d}"
