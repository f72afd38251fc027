"""Douban weekly chart routes."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from services.container import ServiceContainer, get_services
from services.douban import CATEGORIES, get_category
from services.renderer import render_ranking

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/douban/weekly")
async def list_categories() -> dict:
    """Available weekly charts."""
    return {
        "_summary": f"{len(CATEGORIES)} Douban weekly charts available",
        "categories": [
            {"category": c.key, "title": c.title, "emoji": c.emoji, "path": f"/douban/weekly/{c.key}"}
            for c in CATEGORIES.values()
        ],
    }


@router.get("/douban/weekly/{category}")
async def douban_weekly(
    request: Request,
    category: str,
    services: ServiceContainer = Depends(get_services),
) -> Response:
    """Current weekly chart for one category, cached for an hour."""
    config = get_category(category)
    result = await services.douban.get(config.key)

    rendered = render_ranking(result.items, config, request.state.encoding)
    return Response(content=rendered.body, media_type=rendered.media_type)
