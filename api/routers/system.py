"""System router for helloworldapp.

This module provides the health check endpoint.
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_db
from api.schemas import HealthResponse
from migrations import MIGRATION_STEPS, MigrationError, UNINITIALIZED, current_version
from storage import run_in_db_thread

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])

LATEST_SCHEMA_VERSION = max(step.version for step in MIGRATION_STEPS)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, db: sqlite3.Connection = Depends(get_db)):
    """Report whether the database schema is at the latest version."""
    try:
        schema_version = await run_in_db_thread(current_version, db)
    except MigrationError as e:
        logger.error(f"Health check could not read schema version: {e}")
        schema_version = UNINITIALIZED

    return HealthResponse(
        status="ok" if schema_version >= LATEST_SCHEMA_VERSION else "degraded",
        version=request.app.version,
        schema_version=schema_version,
        latest_schema_version=LATEST_SCHEMA_VERSION,
    )
