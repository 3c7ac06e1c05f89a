"""FastAPI application for helloworldapp.

This module provides the application setup, middleware and router
configuration. Route handlers live in the api/routers/ directory.

The database must already be migrated when create_app() is called; the
server entry point in api/server.py does that before binding.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles

from config import AppConfig
from api.routers import pages_router, system_router
from api.routers.pages import UI_DIR

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE",
    "Access-Control-Allow-Headers": "Accept, Content-Type, Content-Length, Authorization",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("helloworldapp API started")

    yield

    # Cleanup on shutdown
    logger.info("helloworldapp API shutting down")
    if app.state.db is not None:
        app.state.db.close()


def create_app(
    db: Optional[sqlite3.Connection],
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db: Migrated database connection, shared by request handlers.
        config: Application configuration.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or AppConfig()
    application = FastAPI(
        title=config.app_name,
        description="Hello world server backed by a migrated SQLite database",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    application.state.db = db
    application.state.config = config

    @application.middleware("http")
    async def logging_middleware(request: Request, call_next) -> Response:
        uri = request.url.path
        if request.url.query:
            uri = f"{uri}?{request.url.query}"
        logger.info(f'Incoming request to "{uri}"')

        # /helloworld/ and /helloworld are the same route
        path = request.scope["path"]
        if len(path) > 1:
            request.scope["path"] = path.rstrip("/") or "/"

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    # Static files are mounted after the routes since they match more paths
    application.include_router(system_router)
    application.include_router(pages_router)
    application.mount("/ui", StaticFiles(directory=str(UI_DIR)), name="ui")

    return application
