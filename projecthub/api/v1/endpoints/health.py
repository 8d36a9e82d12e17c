"""Health endpoints: liveness and database readiness."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.core.config import get_settings
from projecthub.infrastructure.persistence.database import get_db
from projecthub.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe; does not touch the database."""
    settings = get_settings()
    return HealthResponse(status="ok", app=settings.app_name, version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def ready(db: Annotated[AsyncSession, Depends(get_db)]):
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Readiness check failed")
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="unavailable", database="error").model_dump(),
        )
    return ReadinessResponse(status="ok", database="ok")
