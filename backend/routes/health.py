"""Readiness check route."""

import logging

from fastapi import APIRouter, Depends

from config import settings
from services.container import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(services: ServiceContainer = Depends(get_services)) -> dict:
    """Lightweight readiness check — no external calls."""
    return {
        "status": "ok",
        "service": "feed-aggregator",
        "commit": settings.git_sha,
        "cache_entries": services.cache_sizes(),
    }
