"""Schema migrations for the helloworldapp SQLite database.

Migrations are SQL scripts in the migrations/sql/ directory, applied in
ascending version order. Each applied script stamps its version into the
``version`` tracking table; ``MAX(version)`` is the current schema version.

Usage:
    # Run all pending migrations
    python -m migrations.runner

    # Check migration status
    python -m migrations.runner --status
"""

from .errors import (
    MigrationError,
    MigrationFailedError,
    ScriptNotFoundError,
    StatementError,
    TableMissingError,
    TransactionControlError,
    VersionQueryError,
)
from .executor import execute_statement
from .inspector import UNINITIALIZED, current_version
from .orchestrator import MigrationReport, migrate
from .runner import ScriptResult, run_script, split_statements
from .steps import (
    MIGRATION_STEPS,
    FileScriptSource,
    MappingScriptSource,
    MigrationStep,
    ScriptSource,
)

__all__ = [
    "MigrationError",
    "MigrationFailedError",
    "ScriptNotFoundError",
    "StatementError",
    "TableMissingError",
    "TransactionControlError",
    "VersionQueryError",
    "execute_statement",
    "UNINITIALIZED",
    "current_version",
    "MigrationReport",
    "migrate",
    "ScriptResult",
    "run_script",
    "split_statements",
    "MIGRATION_STEPS",
    "FileScriptSource",
    "MappingScriptSource",
    "MigrationStep",
    "ScriptSource",
]
