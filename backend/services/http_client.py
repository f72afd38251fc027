"""Outbound JSON fetching over httpx.

Every upstream call goes through fetch_json so failures surface uniformly
as FetchError. No retries: a failed fetch is the caller's problem.
"""

import json
import logging
from typing import Any

import httpx

from config import settings
from errors import FetchError

logger = logging.getLogger(__name__)


async def fetch_json(
    url: str,
    headers: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET url and decode the JSON body.

    Raises FetchError on network errors, non-2xx statuses and bodies that
    are not valid JSON.
    """
    if timeout is None:
        timeout = settings.http_timeout_seconds

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Upstream %s returned %s", url, e.response.status_code)
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Upstream request to %s failed: %s", url, e)
            raise FetchError(url, str(e) or type(e).__name__) from e

    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Upstream %s returned undecodable JSON: %s", url, e)
        raise FetchError(url, "response body is not valid JSON") from e
