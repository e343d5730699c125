"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from jobportal import __version__
from jobportal.config import Settings, get_settings
from jobportal.database import Database
from jobportal.logging_config import configure_logging
from jobportal.pipeline import Pipeline, build_stages
from jobportal.routers import ROUTES
from jobportal.sessions.store import DatabaseSessionStore, MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    session_store: SessionStore | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (loaded from the environment if omitted)
        database: Connection pool (built from ``settings.database_url`` if omitted)
        session_store: Session store (chosen by ``settings.session_store`` if omitted)

    Returns:
        FastAPI app wrapped in the request pipeline

    Raises:
        pydantic.ValidationError: If required settings are missing or invalid
    """
    settings = settings or get_settings()
    config = settings.pipeline_config()
    database = database or Database(settings.database_url)
    if session_store is None:
        if settings.session_store == "memory":
            session_store = MemorySessionStore()
        else:
            session_store = DatabaseSessionStore(database)

    if not config.allowed_origins:
        logger.warning("No CORS origins configured; all cross-origin requests will be rejected")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Covers `uvicorn jobportal.main:create_app --factory` as well as run()
        configure_logging(settings.log_level)
        database.connect()
        try:
            yield
        finally:
            await session_store.close()
            database.dispose()

    app = FastAPI(
        title="Job Portal API",
        description="Backend API for job postings, applications and user accounts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pipeline_config = config
    app.state.database = database
    app.state.session_store = session_store

    # Mount routers
    for prefix, router in ROUTES:
        app.include_router(router, prefix=prefix)

    # Every request runs CORS, body, cookie, session, static and scoped stages before dispatch
    app.add_middleware(Pipeline, stages=build_stages(config, session_store))
    return app


def run() -> None:
    """Start the server with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting Job Portal API on %s:%s", settings.host, settings.port)
    uvicorn.run(
        "jobportal.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
