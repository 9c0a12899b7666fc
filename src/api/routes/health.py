"""Liveness and readiness probes."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.models import PostModel, ProfileModel
from infrastructure.database.session import get_async_session

API_VERSION = "1.0.0"

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Probe result; ``checks`` is only filled by the readiness probe."""

    status: str
    version: str
    timestamp: str
    environment: str
    checks: dict[str, str] = Field(default_factory=dict)


def _probe(status: str, checks: dict[str, str] | None = None) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        checks=checks or {},
    )


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    """Report that the process is up without touching the database."""
    return _probe("healthy")


@router.get("/health/detailed", response_model=HealthResponse, summary="Readiness check")
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Check that both feed tables answer a trivial read.

    Status is ``degraded`` when either table cannot be read; the feed
    would return QUERY_FAILED in that state.
    """
    checks: dict[str, str] = {}
    for name, model in (("profiles", ProfileModel), ("posts", PostModel)):
        try:
            await db.execute(select(model.id).limit(1))
            checks[name] = "ok"
        except SQLAlchemyError as e:
            logger.warning("readiness_check_failed", table=name, error=str(e))
            checks[name] = f"unavailable: {type(e).__name__}"
            await db.rollback()

    healthy = all(value == "ok" for value in checks.values())
    return _probe("healthy" if healthy else "degraded", checks)
