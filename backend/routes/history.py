"""Today in history route."""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response

from services.container import ServiceContainer, get_services
from services.renderer import render_history

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/today_in_history")
async def today_in_history(
    request: Request,
    date: str | None = Query(None, description="ISO date, defaults to today (Asia/Shanghai)"),
    services: ServiceContainer = Depends(get_services),
) -> Response:
    """Events that happened on this month-day in past years."""
    day = services.history.adapter.resolve_day(date)
    result = await services.history.get(day)

    rendered = render_history(result.items, day, request.state.encoding)
    return Response(content=rendered.body, media_type=rendered.media_type)
