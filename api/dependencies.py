"""Shared dependencies for API routers.

The database connection is created by the server entry
point and stored on ``app.state`` by create_app().
"""

import sqlite3

from fastapi import HTTPException, Request


def get_db(request: Request) -> sqlite3.Connection:
    """Dependency for getting the database connection."""
    conn = getattr(request.app.state, "db", None)
    if conn is None:
        raise HTTPException(status_code=503, detail="Database not initialized")
    return conn

