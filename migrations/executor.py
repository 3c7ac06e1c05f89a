"""Single-statement execution against a SQLite connection."""

import sqlite3

from .errors import StatementError, TableMissingError

NO_SUCH_TABLE = "no such table"


def execute_statement(conn: sqlite3.Connection, statement: str) -> None:
    """Execute exactly one SQL statement.

    Errors are not retried; the first one is raised to the caller.

    Args:
        conn: Database connection.
        statement: A single SQL statement.

    Raises:
        TableMissingError: If the statement references a missing table.
        StatementError: If the statement fails for any other reason.
    """
    try:
        conn.execute(statement)
    except (sqlite3.Error, sqlite3.Warning) as e:
        message = str(e)
        if message.startswith(NO_SUCH_TABLE):
            raise TableMissingError(statement, message) from e
        raise StatementError(statement, message) from e
