"""Application lifespan: startup and shutdown.

Wiring only: logging, schema creation for development, blob store and
SQL engine disposal.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from projecthub.core.config import get_settings
from projecthub.infrastructure.external.storage import StorageFactory
from projecthub.infrastructure.persistence.database import create_schema, dispose_engine
from projecthub.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the engine."""
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.database_auto_create:
        await create_schema()
        logger.info("Database schema ensured")

    app.state.blob_store = StorageFactory.create_blob_store(settings)
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    await dispose_engine()
    logger.info("Database engine disposed")
