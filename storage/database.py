"""
Database access module for helloworldapp.

This module owns the SQLite file: it creates the data directory, opens the
connection used for the lifetime of the process, and brings the schema up
to date before the HTTP server starts.

Usage:
    from storage.database import init_database

    conn, report = init_database(config)
    # conn is passed on to the web app; nothing here keeps a global handle
"""

import asyncio
import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import Callable, Optional, TypeVar

from config import AppConfig
from migrations import FileScriptSource, MigrationReport, ScriptSource, migrate

logger = logging.getLogger(__name__)

# Serializes request-handler access to the shared connection
_db_lock = threading.Lock()

T = TypeVar("T")


def ensure_database_dir(db_path: Path, dir_mode: int = 0o754) -> Path:
    """Create the directory holding the database file if it doesn't exist.

    Returns:
        The database directory.
    """
    db_dir = Path(db_path).expanduser().parent
    if not db_dir.exists():
        logger.info(f"Creating directory: {db_dir}")
        db_dir.mkdir(parents=True, exist_ok=True)
        # mkdir's mode is masked by the umask
        os.chmod(db_dir, dir_mode)
    return db_dir


def open_database(db_path: Path, dir_mode: int = 0o754) -> sqlite3.Connection:
    """Open a connection to the database file, creating it if needed.

    The connection is in autocommit mode so that migration scripts control
    their own transactions, and may be shared with request handlers
    running outside the thread that opened it.
    """
    db_path = Path(db_path).expanduser()
    ensure_database_dir(db_path, dir_mode)
    conn = sqlite3.connect(str(db_path), isolation_level=None, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def ping(conn: sqlite3.Connection) -> bool:
    """Check that the database answers a trivial query."""
    try:
        conn.execute("SELECT 1").fetchone()
        return True
    except sqlite3.Error as e:
        logger.error(f"Database ping failed: {e}")
        return False


def init_database(
    config: AppConfig,
    source: Optional[ScriptSource] = None,
) -> tuple[sqlite3.Connection, MigrationReport]:
    """Open the configured database and migrate it to the latest version.

    Called once on application startup, before the server binds.

    Args:
        config: Application configuration.
        source: Migration script source. Defaults to the bundled scripts.

    Returns:
        Tuple of (connection, migration report).

    Raises:
        MigrationFailedError: If a migration fails and the configuration
            says to abort on failure. The connection is closed first.
    """
    db_path = config.database_path()
    conn = open_database(db_path, config.database.dir_mode)

    logger.info(f"Pinging database {db_path}")
    ping(conn)

    try:
        report = migrate(
            conn,
            source or FileScriptSource(),
            abort_on_failure=config.migrations.abort_on_failure,
        )
    except Exception:
        conn.close()
        raise

    return conn, report


async def run_in_db_thread(func: Callable[..., T], *args) -> T:
    """Run a blocking database call in the default executor.

    Request handlers share one connection, so calls are serialized.

    Example:
        version = await run_in_db_thread(current_version, db)
    """
    loop = asyncio.get_event_loop()

    def _execute():
        with _db_lock:
            return func(*args)

    return await loop.run_in_executor(None, _execute)
