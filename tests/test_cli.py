"""Tests for the server entry point and the migration runner CLI.

Run with: pytest tests/test_cli.py -v
"""

import sqlite3
import tempfile
from pathlib import Path

import pytest
import yaml

from api import server
from migrations import MigrationFailedError
from migrations.runner import main as migrate_main
from migrations.runner import run_migrations, show_status


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write_config(config_dir: Path, db_path: Path) -> None:
    (config_dir / "config.yaml").write_text(
        yaml.safe_dump({"database": {"path": str(db_path)}, "api_port": 9123})
    )


class TestServerMain:
    """Tests for startup ordering in api.server.main."""

    def test_migrates_then_serves(self, workdir, monkeypatch):
        """Test that the database is migrated before uvicorn starts."""
        db_path = workdir / "data" / "app.db"
        _write_config(workdir, db_path)
        calls = {}

        def fake_run(app, **kwargs):
            # The database is already migrated when the listener would bind
            calls["schema"] = app.state.db.execute("SELECT MAX(version) FROM version").fetchone()[0]
            calls.update(kwargs)
            app.state.db.close()

        monkeypatch.setattr(server.uvicorn, "run", fake_run)
        server.main(["--config-dir", str(workdir)])

        assert calls["schema"] == 1
        assert calls["host"] == "127.0.0.1"
        assert calls["port"] == 9123
        assert calls["timeout_keep_alive"] == 15

    def test_port_flag_overrides_config(self, workdir, monkeypatch):
        """Test that --port wins over the config file."""
        _write_config(workdir, workdir / "app.db")
        calls = {}

        def fake_run(app, **kwargs):
            calls.update(kwargs)
            app.state.db.close()

        monkeypatch.setattr(server.uvicorn, "run", fake_run)
        server.main(["--config-dir", str(workdir), "--port", "9999"])

        assert calls["port"] == 9999

    def test_migration_failure_exits(self, workdir, monkeypatch):
        """Test that a failed migration exits 1 without serving."""
        _write_config(workdir, workdir / "app.db")

        def failing_init(config):
            raise MigrationFailedError("init failed")

        monkeypatch.setattr(server, "init_database", failing_init)
        monkeypatch.setattr(server.uvicorn, "run", pytest.fail)

        with pytest.raises(SystemExit) as exc_info:
            server.main(["--config-dir", str(workdir)])
        assert exc_info.value.code == 1

    def test_bad_config_exits(self, workdir, monkeypatch):
        """Test that an unreadable config exits 1."""
        (workdir / "config.yaml").write_text("api_port: [\n")
        monkeypatch.setattr(server.uvicorn, "run", pytest.fail)

        with pytest.raises(SystemExit) as exc_info:
            server.main(["--config-dir", str(workdir)])
        assert exc_info.value.code == 1


class TestMigrationRunner:
    """Tests for the migration runner commands."""

    def test_dry_run_applies_nothing(self, workdir, capsys):
        """Test that --dry-run lists the steps and leaves the database alone."""
        db_path = workdir / "app.db"

        assert run_migrations(db_path, dry_run=True) == -1
        out = capsys.readouterr().out
        assert "Would apply: 000_init" in out
        assert "Would apply: 001_v1" in out

        assert run_migrations(db_path, dry_run=True) == -1

    def test_run_then_status(self, workdir, capsys):
        """Test applying migrations and reporting their status."""
        db_path = workdir / "app.db"

        assert run_migrations(db_path) == 1
        assert "Applied: init" in capsys.readouterr().out

        assert run_migrations(db_path) == 1
        assert "All migrations already applied." in capsys.readouterr().out

        show_status(db_path)
        out = capsys.readouterr().out
        assert "Current version: 1" in out
        assert "[APPLIED] 001_v1" in out

    def test_status_missing_database(self, workdir, capsys):
        """Test status for a database file that does not exist."""
        show_status(workdir / "missing.db")
        assert "Database not found" in capsys.readouterr().out

    def test_status_unreadable_version_exits(self, workdir, capsys):
        """Test that --status reports an unreadable version table and exits 1."""
        db_path = workdir / "app.db"
        conn = sqlite3.connect(str(db_path))
        conn.execute("CREATE TABLE version (v INTEGER)")
        conn.commit()
        conn.close()

        with pytest.raises(SystemExit) as exc_info:
            migrate_main(["--db", str(db_path), "--status"])

        assert exc_info.value.code == 1
        assert "FAILED" in capsys.readouterr().out

    def test_run_failure_exits(self, workdir, capsys):
        """Test that a failed migration run exits 1."""
        db_path = workdir / "app.db"
        conn = sqlite3.connect(str(db_path))
        conn.execute("CREATE TABLE version (v INTEGER)")
        conn.commit()
        conn.close()

        with pytest.raises(SystemExit) as exc_info:
            migrate_main(["--db", str(db_path)])

        assert exc_info.value.code == 1
        assert "Cannot determine schema version" in capsys.readouterr().out
