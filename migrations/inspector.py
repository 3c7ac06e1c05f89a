"""Schema version inspection.

The ``version`` table holds one row per applied migration; the highest
value is the current schema version. A database without the table has
never been initialized, which is reported as ``UNINITIALIZED``.
"""

import logging
import sqlite3

from .errors import VersionQueryError

logger = logging.getLogger(__name__)

UNINITIALIZED = -1

VERSION_QUERY = "SELECT MAX(version) FROM version"
MISSING_VERSION_TABLE = "no such table: version"


def current_version(conn: sqlite3.Connection) -> int:
    """Get the highest recorded schema version.

    Args:
        conn: Database connection.

    Returns:
        The current version, or UNINITIALIZED (-1) if the version table
        does not exist or holds no rows.

    Raises:
        VersionQueryError: If the query fails for any other reason.
    """
    try:
        row = conn.execute(VERSION_QUERY).fetchone()
    except sqlite3.Error as e:
        if str(e) == MISSING_VERSION_TABLE:
            return UNINITIALIZED
        logger.error(f"Failed to read schema version: {e}")
        raise VersionQueryError(f"Failed to read schema version: {e}") from e

    if row is None or row[0] is None:
        return UNINITIALIZED
    return int(row[0])
