"""Tests for database bootstrap and the visit repository.

Run with: pytest tests/test_storage.py -v
"""

import sqlite3
import stat
import tempfile
import threading
from pathlib import Path

import pytest

from config import AppConfig
from migrations import MappingScriptSource, MigrationFailedError, current_version
from storage import VisitRepository, init_database, open_database, ping, run_in_db_thread


@pytest.fixture
def tmpdir_path():
    """Create a temporary directory for database files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _config(db_path: Path, abort_on_failure: bool = True) -> AppConfig:
    return AppConfig(
        database={"path": str(db_path)},
        migrations={"abort_on_failure": abort_on_failure},
    )


class TestOpenDatabase:
    """Tests for opening the database file."""

    def test_creates_directory_with_mode(self, tmpdir_path):
        """Test that the data directory is created with its mode."""
        db_path = tmpdir_path / "helloworldapp" / "helloworldapp.db"
        conn = open_database(db_path)
        try:
            db_dir = db_path.parent
            assert db_dir.is_dir()
            assert stat.S_IMODE(db_dir.stat().st_mode) == 0o754
            assert db_path.exists()
        finally:
            conn.close()

    def test_existing_directory_untouched(self, tmpdir_path):
        """Test that an existing directory keeps its mode."""
        db_dir = tmpdir_path / "existing"
        db_dir.mkdir(mode=0o700)
        conn = open_database(db_dir / "test.db")
        conn.close()
        assert stat.S_IMODE(db_dir.stat().st_mode) == 0o700

    def test_autocommit_mode(self, tmpdir_path):
        """Test that connections are opened in autocommit mode."""
        conn = open_database(tmpdir_path / "test.db")
        try:
            assert conn.isolation_level is None
            assert ping(conn) is True
        finally:
            conn.close()


class TestInitDatabase:
    """Tests for the startup bootstrap."""

    def test_fresh_database_is_migrated(self, tmpdir_path):
        """Test that startup migrates a fresh database."""
        conn, report = init_database(_config(tmpdir_path / "app" / "app.db"))
        try:
            assert report.succeeded
            assert report.applied == ["init", "v1"]
            assert current_version(conn) == 1
        finally:
            conn.close()

    def test_second_startup_applies_nothing(self, tmpdir_path):
        """Test that a second startup applies nothing."""
        config = _config(tmpdir_path / "app.db")
        conn, _ = init_database(config)
        conn.close()

        conn, report = init_database(config)
        try:
            assert report.applied == []
            assert report.final_version == 1
        finally:
            conn.close()

    def test_failure_aborts_when_configured(self, tmpdir_path):
        """Test that startup raises when configured to abort."""
        broken = MappingScriptSource({"sql/init.sql": "CREATE TABLL version (version INTEGER);"})
        with pytest.raises(MigrationFailedError):
            init_database(_config(tmpdir_path / "app.db"), source=broken)

    def test_failure_degraded_mode(self, tmpdir_path):
        """Test that startup continues in degraded mode."""
        broken = MappingScriptSource({"sql/init.sql": "CREATE TABLL version (version INTEGER);"})
        conn, report = init_database(
            _config(tmpdir_path / "app.db", abort_on_failure=False),
            source=broken,
        )
        try:
            assert not report.succeeded
            assert report.final_version == -1
        finally:
            conn.close()


class TestVisitRepository:
    """Tests for the visit table created by migration v1."""

    def test_record_and_count(self, tmpdir_path):
        """Test recording and counting visits."""
        conn, _ = init_database(_config(tmpdir_path / "app.db"))
        try:
            repo = VisitRepository(conn)
            repo.record("/helloworld")
            repo.record("/helloworld")
            repo.record("/other")

            assert repo.count() == 3
            assert repo.count("/helloworld") == 2
            assert repo.count("/missing") == 0
        finally:
            conn.close()


@pytest.mark.asyncio
class TestRunInDbThread:
    """Tests for running blocking database calls off the event loop."""

    async def test_runs_in_worker_thread(self, tmpdir_path):
        """Test that the call runs outside the event loop thread."""
        conn, _ = init_database(_config(tmpdir_path / "app.db"))
        loop_thread = threading.get_ident()
        try:
            version, call_thread = await run_in_db_thread(
                lambda db: (current_version(db), threading.get_ident()), conn
            )
            assert version == 1
            assert call_thread != loop_thread
        finally:
            conn.close()

    async def test_errors_propagate(self, tmpdir_path):
        """Test that exceptions from the call reach the awaiting handler."""
        conn = open_database(tmpdir_path / "test.db")
        try:
            with pytest.raises(sqlite3.OperationalError):
                await run_in_db_thread(conn.execute, "SELECT * FROM nowhere")
        finally:
            conn.close()
