"""Startup migration orchestrator.

Walks the migration steps in ascending version order and applies every
step whose version is above the current schema version:

    -1 (uninitialized) --init--> 0 --v1--> 1

After each step the version is read back from the database. A step that
did not advance the version stops the chain, since later steps depend on
it. Whether that aborts startup is the caller's choice.
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .errors import MigrationError, MigrationFailedError
from .inspector import UNINITIALIZED, current_version
from .runner import run_script
from .steps import MIGRATION_STEPS, MigrationStep, ScriptSource

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    """Outcome of one orchestrator run."""

    start_version: int = UNINITIALIZED
    final_version: int = UNINITIALIZED
    applied: list[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None and self.error is None


def pending_steps(
    version: int,
    steps: Iterable[MigrationStep] = MIGRATION_STEPS,
) -> list[MigrationStep]:
    """Get the steps above ``version``, sorted by version."""
    return [step for step in sorted(steps, key=lambda s: s.version) if version < step.version]


def _fail(
    report: MigrationReport,
    message: str,
    abort_on_failure: bool,
    cause: Optional[Exception] = None,
) -> MigrationReport:
    report.error = message
    logger.error(message)
    if abort_on_failure:
        raise MigrationFailedError(message, report) from cause
    logger.warning("Continuing with a database that is not fully migrated")
    return report


def migrate(
    conn: sqlite3.Connection,
    source: ScriptSource,
    steps: Iterable[MigrationStep] = MIGRATION_STEPS,
    abort_on_failure: bool = True,
) -> MigrationReport:
    """Bring the database up to the latest schema version.

    Args:
        conn: Database connection in autocommit mode.
        source: Where step scripts are read from.
        steps: Migration steps; applied in ascending version order.
        abort_on_failure: Raise on the first failed step instead of
            returning a report with ``failed_step`` set.

    Returns:
        MigrationReport for this run.

    Raises:
        MigrationFailedError: If a step fails and abort_on_failure is set.
    """
    report = MigrationReport()
    logger.info("Checking database schema version")

    try:
        version = current_version(conn)
    except MigrationError as e:
        return _fail(report, f"Cannot determine schema version: {e}", abort_on_failure, e)

    report.start_version = report.final_version = version
    if version == UNINITIALIZED:
        logger.info('No "version" table.')

    for step in pending_steps(version, steps):
        if version >= step.version:
            logger.info(f"Skipping {step.name}, database is already at version {version}")
            continue

        report.failed_step = step.name
        try:
            result = run_script(
                conn, source.read(step.resource), f"{step.name} (version {step.version})"
            )
            version = current_version(conn)
        except MigrationError as e:
            return _fail(report, f"Migration {step.name} failed: {e}", abort_on_failure, e)

        report.final_version = version
        if not result.committed or version < step.version:
            if result.committed:
                message = f"Migration {step.name} did not reach version {step.version}"
            else:
                message = f"Migration {step.name} was rolled back"
            message = f"{message} (database is at version {version})"
            if result.error:
                message = f"{message}: {result.error}"
            return _fail(report, message, abort_on_failure)

        report.failed_step = None
        report.applied.append(step.name)

    logger.info(f"Current database version: {report.final_version}")
    return report
