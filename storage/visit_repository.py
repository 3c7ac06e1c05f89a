"""
Visit Repository for page view records.

The ``visit`` table is created by the v1 migration. Queries against a
database that never reached v1 fail with sqlite3.OperationalError.
"""

import sqlite3
from typing import Optional


class VisitRepository:
    """Repository for recording and counting page visits."""

    def __init__(self, db_connection: sqlite3.Connection):
        """
        Initialize repository with database connection.

        Args:
            db_connection: SQLite database connection in autocommit mode
        """
        self.db = db_connection

    def record(self, path: str) -> int:
        """Record a visit to ``path`` and return the new row id."""
        cursor = self.db.execute("INSERT INTO visit (path) VALUES (?)", (path,))
        return cursor.lastrowid

    def count(self, path: Optional[str] = None) -> int:
        """Count visits, optionally for a single path."""
        if path is None:
            row = self.db.execute("SELECT COUNT(*) FROM visit").fetchone()
        else:
            row = self.db.execute(
                "SELECT COUNT(*) FROM visit WHERE path = ?", (path,)
            ).fetchone()
        return row[0]
