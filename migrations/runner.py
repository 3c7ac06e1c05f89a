"""Migration script runner for the helloworldapp database.

Handles splitting a migration script into statements and applying them
inside a single transaction, plus the status/dry-run commands.

Scripts may only contain SQL statements, each ending with a semicolon.
Comments and string literals containing ``;`` are not supported since
statements are split on the raw delimiter.
"""

import argparse
import logging
import sqlite3
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import MigrationError, StatementError, TransactionControlError
from .executor import execute_statement

logger = logging.getLogger(__name__)

STATEMENT_DELIMITER = ";"


@dataclass
class ScriptResult:
    """Outcome of running one migration script."""

    script_name: str
    committed: bool
    statements_executed: int = 0
    error: Optional[StatementError] = None


def split_statements(script_text: str) -> list[str]:
    """Split a script into individual statements.

    Each candidate is stripped, embedded newlines are removed, and empty
    candidates are dropped.

    Example:
        >>> split_statements("A; B ; C;")
        ['A', 'B', 'C']
    """
    statements = []
    for candidate in script_text.split(STATEMENT_DELIMITER):
        statement = " ".join(candidate.strip().splitlines()).strip()
        if statement:
            statements.append(statement)
    return statements


def _transaction_control(conn: sqlite3.Connection, statement: str) -> None:
    try:
        execute_statement(conn, statement)
    except StatementError as e:
        logger.error(f"{statement} failed: {e}")
        raise TransactionControlError(f"{statement} failed: {e}") from e


def run_script(
    conn: sqlite3.Connection,
    script_text: str,
    script_name: str,
) -> ScriptResult:
    """Run a migration script in a single transaction.

    Statements are executed in order. The first failing statement rolls
    back the whole script and stops processing; the failure is logged and
    reported in the result rather than raised.

    Args:
        conn: Database connection in autocommit mode.
        script_text: Script containing ``;``-terminated statements.
        script_name: Human-readable name used in log messages.

    Returns:
        ScriptResult describing whether the script was committed.

    Raises:
        TransactionControlError: If BEGIN, COMMIT or ROLLBACK fails.
    """
    _transaction_control(conn, "BEGIN TRANSACTION")
    logger.info(f"Executing script: {script_name}")

    executed = 0
    for statement in split_statements(script_text):
        try:
            execute_statement(conn, statement)
        except StatementError as e:
            _transaction_control(conn, "ROLLBACK")
            logger.error(f"Script {script_name} rolled back: {e} (statement: {statement})")
            return ScriptResult(
                script_name=script_name,
                committed=False,
                statements_executed=executed,
                error=e,
            )
        executed += 1

    try:
        _transaction_control(conn, "COMMIT")
    except TransactionControlError:
        # A failed COMMIT (e.g. a deferred constraint) can leave the
        # transaction open on the shared connection
        if conn.in_transaction:
            _transaction_control(conn, "ROLLBACK")
        raise
    logger.info(f"Committed script {script_name} ({executed} statements)")
    return ScriptResult(script_name=script_name, committed=True, statements_executed=executed)


def run_migrations(db_path: Optional[Path] = None, dry_run: bool = False) -> int:
    """Run all pending migrations against a database file.

    Args:
        db_path: Path to database. Defaults to the configured path.
        dry_run: If True, only list the pending steps.

    Returns:
        The schema version after running.
    """
    from config import ConfigManager
    from storage.database import open_database

    from .inspector import current_version
    from .orchestrator import migrate, pending_steps
    from .steps import FileScriptSource

    config = ConfigManager().get_config()
    conn = open_database(db_path or config.database_path(), config.database.dir_mode)

    try:
        if dry_run:
            version = current_version(conn)
            for step in pending_steps(version):
                print(f"  [DRY RUN] Would apply: {step.version:03d}_{step.name}")
            return version

        report = migrate(conn, FileScriptSource(), abort_on_failure=True)
        for name in report.applied:
            print(f"  Applied: {name}")
        if not report.applied:
            print("All migrations already applied.")
        return report.final_version

    finally:
        conn.close()


def show_status(db_path: Optional[Path] = None) -> None:
    """Show migration status."""
    from config import ConfigManager
    from storage.database import open_database

    from .inspector import current_version
    from .steps import MIGRATION_STEPS

    config = ConfigManager().get_config()
    db_path = db_path or config.database_path()
    if not db_path.exists():
        print(f"Database not found: {db_path}")
        print("Run migrations to create it.")
        return

    conn = open_database(db_path, config.database.dir_mode)
    try:
        version = current_version(conn)
    finally:
        conn.close()

    print(f"Database: {db_path}")
    print(f"Current version: {version}")
    print()
    print("Migration Status:")
    print("-" * 60)
    for step in MIGRATION_STEPS:
        status = "APPLIED" if step.version <= version else "PENDING"
        print(f"  [{status}] {step.version:03d}_{step.name} ({step.resource})")
    print("-" * 60)


def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(description="Database migration runner")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Database path (default: ~/helloworldapp/helloworldapp.db)",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show migration status",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be applied without applying",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        if args.status:
            show_status(args.db)
        else:
            run_migrations(args.db, args.dry_run)
    except MigrationError as e:
        print(f"  FAILED: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
