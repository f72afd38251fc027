"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AggregatorError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class FetchError(AggregatorError):
    """Upstream call failed: network error, non-2xx status or undecodable body."""

    def __init__(self, url: str, reason: str, status_code: int = 502):
        super().__init__(f"Upstream fetch failed for {url}: {reason}", status_code=status_code)
        self.url = url
        self.reason = reason


# Transport failures and fetch failures are the same thing at this layer.
TransportError = FetchError


class SchemaError(FetchError):
    """Upstream answered, but not in the shape we know how to read."""


class UnsupportedCategoryError(AggregatorError):
    def __init__(self, category: str, supported):
        super().__init__(
            f"Unsupported category: {category}. Supported: {sorted(supported)}",
            status_code=400,
        )


class InvalidDateError(AggregatorError):
    def __init__(self, value: str):
        super().__init__(f"Invalid date: {value!r}. Expected e.g. 2024-03-14", status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(AggregatorError)
    async def handle_aggregator_error(_request: Request, exc: AggregatorError):
        if isinstance(exc, FetchError):
            logger.warning("Upstream failure: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
