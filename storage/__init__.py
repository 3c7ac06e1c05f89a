"""helloworldapp - Storage Module.

This module provides the local SQLite storage for the server.

The storage layer is organized as follows:
- database.py: Database file location, connection and startup migration
- visit_repository.py: Page visit records (table created by migration v1)

Example:
    >>> from config import ConfigManager
    >>> from storage import init_database, VisitRepository
    >>>
    >>> conn, report = init_database(ConfigManager().get_config())
    >>> VisitRepository(conn).record("/helloworld")
"""

from .database import (
    ensure_database_dir,
    init_database,
    open_database,
    ping,
    run_in_db_thread,
)
from .visit_repository import VisitRepository

__all__ = [
    "ensure_database_dir",
    "init_database",
    "open_database",
    "ping",
    "run_in_db_thread",
    "VisitRepository",
]
