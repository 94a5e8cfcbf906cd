# ============================================================================
# MONGODB WATCHER - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Core - FastAPI application entry point
# PURPOSE: Register the configured watcher and serve the watcher endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher Main Application

FastAPI application that:
1. Registers a MongoDB watcher from environment variables
2. Serves endpoints to list watchers and run their checks

Environment:
    MONGODB_CONNECTION_STRING   mongodb://<host>:<port>
    MONGODB_DATABASE            database to watch
    MONGODB_COLLECTION          optional, together with MONGODB_QUERY
    MONGODB_QUERY               optional Extended JSON filter
    MONGODB_WATCHER_NAME        optional watcher name
    MONGODB_WATCHER_GROUP       optional watcher group

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import MongoDbWatcherSettings, get_defaults
from core.logging import configure_logging, get_logger
from health import get_registry, health_router
from health.checks.mongodb import Builder, add_mongodb_watcher

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


def register_configured_watchers(settings: MongoDbWatcherSettings) -> int:
    """
    Register the MongoDB watcher described by settings.

    Returns:
        Number of watchers registered
    """
    if not settings.is_configured:
        logger.warning("MONGODB_CONNECTION_STRING / MONGODB_DATABASE not set, no watcher registered")
        return 0

    def configure(builder: Builder) -> None:
        if settings.has_query:
            builder.with_query(settings.collection_name, settings.query)
        elif settings.collection_name or settings.query:
            logger.warning("MONGODB_COLLECTION and MONGODB_QUERY must be set together, query ignored")

    add_mongodb_watcher(
        get_registry(),
        settings.connection_string,
        settings.database,
        name=settings.watcher_name,
        configurator=configure,
        interval_seconds=get_defaults().watcher.interval_seconds,
        group=settings.watcher_group,
    )
    return 1


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Registers watchers on startup, releases their clients on shutdown.
    """
    logger.info(f"Starting MongoDB Watcher v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    registered = register_configured_watchers(get_defaults().mongodb)
    logger.info(f"Watchers initialized ({registered} registered)")

    yield

    logger.info("Shutting down MongoDB Watcher...")
    for registration in get_registry().get_all():
        await registration.watcher.close()
    logger.info("MongoDB Watcher stopped")


app = FastAPI(
    title="MongoDB Watcher",
    description="Reachability and content checks for MongoDB databases",
    version=__version__,
    lifespan=lifespan,
)

# /livez, /watchers, /watchers/check, /watchers/{name}/check
app.include_router(health_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "MongoDB Watcher",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
