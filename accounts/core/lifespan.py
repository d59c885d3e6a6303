"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. No business logic here, only
wiring of infrastructure (cache, database tables, telemetry, engine
dispose). Collaborators that requests depend on are already on app.state
when the app is created; startup only connects them.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from accounts.infrastructure.persistence import database
from accounts.shared.telemetry.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Redis cache (when owned by the app), SQL tables (sql
    backend), telemetry (if enabled). Shutdown order: cache disconnect,
    telemetry shutdown, SQL engine dispose.
    """
    settings = app.state.settings
    owns_cache = bool(getattr(app.state, "owns_cache", False))

    # ---- Startup ----
    if owns_cache and app.state.cache is not None:
        await app.state.cache.connect()

    if settings.database_backend == "sql" and database.engine is not None:
        if settings.database_create_tables:
            await database.create_tables(database.engine)

    telemetry = TelemetryConfig(settings)
    telemetry.start(app, instrument_redis=owns_cache, engine=database.engine)
    app.state.telemetry = telemetry

    logger.info(
        "%s %s started (store=%s, cache=%s)",
        settings.app_name,
        settings.app_version,
        settings.database_backend,
        "redis" if app.state.cache is not None else "disabled",
    )

    yield

    # ---- Shutdown ----
    if owns_cache and app.state.cache is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    telemetry.shutdown()

    if settings.database_backend == "sql":
        await database.dispose_engine()
