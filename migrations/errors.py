"""Exceptions raised by the migration engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .orchestrator import MigrationReport


class MigrationError(Exception):
    """Base class for migration failures."""

    pass


class StatementError(MigrationError):
    """Raised when a single SQL statement fails to execute.

    Attributes:
        statement: The statement text that failed.
    """

    def __init__(self, statement: str, message: str) -> None:
        super().__init__(message)
        self.statement = statement


class TableMissingError(StatementError):
    """Raised when a statement references a table that does not exist."""

    pass


class TransactionControlError(MigrationError):
    """Raised when BEGIN, COMMIT or ROLLBACK fails."""

    pass


class VersionQueryError(MigrationError):
    """Raised when the schema version cannot be read."""

    pass


class ScriptNotFoundError(MigrationError):
    """Raised when a script source has no script with the requested name."""

    pass


class MigrationFailedError(MigrationError):
    """Raised when a migration step did not advance the schema version."""

    def __init__(self, message: str, report: Optional[MigrationReport] = None) -> None:
        super().__init__(message)
        self.report = report
