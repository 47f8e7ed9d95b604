"""Application lifespan: startup and shutdown.

Startup and shutdown wiring for create_app();
no business logic here, only wiring of infrastructure (data access layer,
email dispatcher).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.external.email.dispatcher import build_email_dispatcher
from app.infrastructure.persistence.database import DataAccessLayer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: email dispatcher, then the data access layer when DATABASE_URL is
    set (address resolution and a probe query; failure aborts startup).
    Shutdown: pool dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.email_dispatcher = build_email_dispatcher(settings)

    if settings.database_configured:
        data_access = DataAccessLayer.from_settings(settings)
        await data_access.init()
        app.state.data_access = data_access
    else:
        logger.warning(
            "DATABASE_URL is not set; endpoints that need the database will return 503"
        )
        app.state.data_access = None

    yield

    # ---- Shutdown ----
    data_access = getattr(app.state, "data_access", None)
    if data_access is not None:
        await data_access.close()
        app.state.data_access = None
        logger.info("Database pool disposed")
