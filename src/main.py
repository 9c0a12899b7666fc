"""Feedline ASGI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from infrastructure.database.session import engine

setup_logging()

logger = structlog.get_logger()

DESCRIPTION = """\
## Minimal social feed

Signed-in users publish short text posts (1-500 characters after trimming),
keep a profile with a display name and bio, and read either the global feed
or one user's posts, newest first, each post carrying its author.

### Authentication
Every `/api/v1` route needs `Authorization: Bearer <token>`. A profile is
created automatically on an identity's first request.
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and readiness"},
    {"name": "feed", "description": "The global feed"},
    {"name": "posts", "description": "Publishing posts"},
    {"name": "profiles", "description": "Profiles and per-user feeds"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and release pooled connections on shutdown."""
    logger.info("application_started", environment=settings.app_env, version=API_VERSION)
    yield
    await engine.dispose()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, handlers and routers."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        license_info={"name": "MIT"},
        openapi_tags=OPENAPI_TAGS,
    )

    # Starlette runs middleware in reverse order of registration
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
