"""Render normalized items as plain text, markdown or JSON.

Pure functions: same items + context + encoding always give the same body.
Unknown encodings fall back to structured JSON rather than failing.
"""

import json
from dataclasses import dataclass
from typing import Sequence

from services.douban import Category
from services.models import HistoryDay, HistoryEvent, RankedItem

PLAIN = "plain"
MARKDOWN = "markdown"
STRUCTURED = "structured"

# Encoding names as they arrive on the request
_ENCODINGS = {"text": PLAIN, "markdown": MARKDOWN}

TREND_SYMBOL = {"up": "↑", "down": "↓", "equal": "-"}

RANKING_TABLE_HEADER = (
    "| 排名 | 名称 | 评分 | 好评率 | 简介 | 趋势 |\n"
    "|------|------|------|--------|------|------|"
)


@dataclass(frozen=True, slots=True)
class Rendered:
    body: str
    media_type: str


def resolve_encoding(value: str | None) -> str:
    return _ENCODINGS.get((value or "").strip().lower(), STRUCTURED)


def render(items: Sequence, context, encoding: str | None) -> Rendered:
    """Render items for a history day or a ranking category."""
    if isinstance(context, HistoryDay):
        return render_history(items, context, encoding)
    if isinstance(context, Category):
        return render_ranking(items, context, encoding)
    raise TypeError(f"Cannot render for context {context!r}")


# ---------------------------------------------------------------------------
# Today in history
# ---------------------------------------------------------------------------

def render_history(items: Sequence[HistoryEvent], day: HistoryDay, encoding: str | None) -> Rendered:
    mode = resolve_encoding(encoding)

    if mode == PLAIN:
        lines = [f"{idx}. {e.title} ({e.year} 年)" for idx, e in enumerate(items, 1)]
        return Rendered(f"历史上的今天 ({day.date})\n\n" + "\n".join(lines), "text/plain; charset=utf-8")

    if mode == MARKDOWN:
        sections = [
            f"### {idx}. [{e.title}]({e.link}) `{e.year} 年`\n\n{e.description}\n\n---\n"
            for idx, e in enumerate(items, 1)
        ]
        return Rendered(f"# 历史上的今天 ({day.date})\n\n" + "\n".join(sections), "text/markdown; charset=utf-8")

    payload = {
        "_summary": _history_summary(items, day),
        "date": day.date,
        "month": day.month,
        "day": day.day,
        "items": [e.to_dict() for e in items],
    }
    return _json(payload)


def _history_summary(items: Sequence[HistoryEvent], day: HistoryDay) -> str:
    if not items:
        return f"No historical events recorded for {day.date}"
    return f"{len(items)} historical events on {day.date}, from {items[0].year} to {items[-1].year}"


# ---------------------------------------------------------------------------
# Douban weekly
# ---------------------------------------------------------------------------

def format_trend(item: RankedItem) -> str:
    symbol = TREND_SYMBOL.get(item.trend, TREND_SYMBOL["equal"])
    if item.rank_change:
        return f"{symbol}{abs(item.rank_change)}"
    return symbol


def format_number(value: float) -> str:
    return f"{value:g}"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_ranking_row(item: RankedItem) -> str:
    rating = f"⭐{format_number(item.rating)}" if item.rating else "暂无"
    return (
        f"| {item.rank} | [{_cell(item.title)}]({item.url}) | {rating} ({item.rating_count}人) "
        f"| {format_number(item.good_rate)}% | {_cell(item.subtitle)} | {format_trend(item)} |"
    )


def render_ranking(items: Sequence[RankedItem], category: Category, encoding: str | None) -> Rendered:
    mode = resolve_encoding(encoding)

    if mode == PLAIN:
        lines = []
        for e in items:
            rating = f"⭐{format_number(e.rating)}" if e.rating else "暂无评分"
            lines.append(f"{e.rank}. {e.title} {rating} {format_trend(e)}\n   {e.subtitle}")
        body = f"豆瓣{category.title}\n\n" + "\n".join(lines) + "\n\n数据来源：豆瓣"
        return Rendered(body, "text/plain; charset=utf-8")

    if mode == MARKDOWN:
        rows = "\n".join(render_ranking_row(e) for e in items)
        body = f"# {category.emoji} 豆瓣{category.title}\n\n{RANKING_TABLE_HEADER}\n{rows}\n\n*数据来源: 豆瓣*"
        return Rendered(body, "text/markdown; charset=utf-8")

    payload = {
        "_summary": _ranking_summary(items, category),
        "category": category.key,
        "title": category.title,
        "items": [e.to_dict() for e in items],
    }
    return _json(payload)


def _ranking_summary(items: Sequence[RankedItem], category: Category) -> str:
    if not items:
        return f"Douban {category.key}: no items available"
    top = items[0]
    return f"Douban {category.key}: {len(items)} items, #1 {top.title} ({format_number(top.rating)})"


def _json(payload: dict) -> Rendered:
    return Rendered(json.dumps(payload, ensure_ascii=False), "application/json")
