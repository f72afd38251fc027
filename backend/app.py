"""FastAPI application entry point for the feed aggregator."""

import logging
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.container import ServiceContainer, build_services

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "json"


def create_app(
    app_settings: Settings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Feed Aggregator API", version="1.0.0")

    problems = app_settings.validate()
    if problems:
        logger.warning("Configuration problems: %s", "; ".join(problems))

    # Cache stores live on the app for the lifetime of the process
    app.state.services = services or build_services(app_settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Encoding preference (?encoding=text|markdown|json) for the renderers
    @app.middleware("http")
    async def attach_encoding(request: Request, call_next):
        request.state.encoding = request.query_params.get("encoding", DEFAULT_ENCODING)
        return await call_next(request)

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if app_settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.douban import router as douban_router
    from routes.health import router as health_router
    from routes.history import router as history_router

    app.include_router(health_router)
    app.include_router(history_router)
    app.include_router(douban_router)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
