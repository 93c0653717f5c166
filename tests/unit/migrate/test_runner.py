"""Unit tests for whole-file migration runs."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from core.config import UnwrapConfig
from core.errors import (
    UnwrapConfigError,
    UnwrapConnectionError,
    UnwrapMalformedInputError,
    UnwrapSchemaError,
)
from core.types import MigrationOptions
from migrate import runner
from migrate.runner import MigrationRunner, run_migration
from tests.sqlite_fixtures import build_source_database, read_rows, read_table_names


def test_run_migration_copies_all_tables(tmp_path: Path) -> None:
    """Every source table should appear in the destination with its rows."""
    source_path = build_source_database(
        tmp_path / "source.db",
        {"users": [("u1", '"{}"')], "orders": [("o1", '"1"'), ("o2", '"2"')]},
    )
    destination_path = tmp_path / "out.db"

    summary = run_migration(MigrationOptions(source_path, destination_path))

    assert (summary.table_count, summary.row_count) == (2, 3) and read_table_names(
        destination_path
    ) == ["orders", "users"]


def test_run_migration_rejects_identical_paths(tmp_path: Path) -> None:
    """The same path for input and output aborts before opening anything."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})
    before = source_path.read_bytes()

    with pytest.raises(UnwrapConfigError):
        run_migration(MigrationOptions(source_path, tmp_path / "." / "source.db"))

    assert source_path.read_bytes() == before


def test_run_migration_rejects_identical_paths_before_opening(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Path validation should run before any database is opened."""
    opened: list[Path] = []
    monkeypatch.setattr(runner, "open_source_database", opened.append)

    with pytest.raises(UnwrapConfigError):
        run_migration(MigrationOptions(tmp_path / "a.db", tmp_path / "a.db"))

    assert opened == []


def test_run_migration_rejects_existing_destination(tmp_path: Path) -> None:
    """An existing destination file is left untouched."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})
    destination_path = tmp_path / "out.db"
    destination_path.write_bytes(b"keep me")

    with pytest.raises(UnwrapConfigError):
        run_migration(MigrationOptions(source_path, destination_path))

    assert destination_path.read_bytes() == b"keep me"


def test_run_migration_checks_source_before_destination(tmp_path: Path) -> None:
    """A missing source is reported even when the destination exists."""
    destination_path = tmp_path / "out.db"
    destination_path.write_bytes(b"keep me")

    with pytest.raises(UnwrapConnectionError):
        run_migration(MigrationOptions(tmp_path / "missing.db", destination_path))


def test_run_migration_stops_at_first_malformed_row(tmp_path: Path) -> None:
    """Later tables are not processed once a row fails."""
    source_path = build_source_database(
        tmp_path / "source.db",
        {"first": [("a", '"x"'), ("b", "not-json")], "second": [("c", '"y"')]},
    )
    destination_path = tmp_path / "out.db"

    with pytest.raises(UnwrapMalformedInputError):
        run_migration(MigrationOptions(source_path, destination_path))

    assert read_table_names(destination_path) == ["first"] and read_rows(
        destination_path, "first"
    ) == [("a", "x")]


def test_run_migration_closes_connections_on_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Both connections should be released when a table fails."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})
    opened: list[sqlite3.Connection] = []
    original_open = runner.open_source_database
    original_create = runner.create_destination_database

    def tracking_open(path: Path) -> sqlite3.Connection:
        connection = original_open(path)
        opened.append(connection)
        return connection

    def tracking_create(path: Path) -> sqlite3.Connection:
        connection = original_create(path)
        connection.execute("CREATE TABLE T (ID TEXT, json TEXT)")
        opened.append(connection)
        return connection

    monkeypatch.setattr(runner, "open_source_database", tracking_open)
    monkeypatch.setattr(runner, "create_destination_database", tracking_create)

    with pytest.raises(UnwrapSchemaError):
        run_migration(MigrationOptions(source_path, tmp_path / "out.db"))

    with pytest.raises(sqlite3.ProgrammingError):
        opened[0].execute("SELECT 1")
    with pytest.raises(sqlite3.ProgrammingError):
        opened[1].execute("SELECT 1")


def test_runner_reports_progress_through_injected_logger(tmp_path: Path) -> None:
    """An injected logger should receive every progress event."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})
    events: list[str] = []

    class _RecordingLogger:
        def info(self, event: str, **fields: object) -> None:
            events.append(event)

    MigrationRunner(
        MigrationOptions(source_path, tmp_path / "out.db"),
        logger=_RecordingLogger(),
    ).run()

    assert events == [
        "loading_source",
        "source_loaded",
        "creating_destination",
        "discovering_tables",
        "tables_found",
        "processing_table",
        "processing_row",
        "table_migrated",
        "migration_completed",
    ]


def test_runner_honours_row_progress_setting(tmp_path: Path) -> None:
    """Row events follow the config flag."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})

    with capture_logs() as logs:
        run_migration(
            MigrationOptions(source_path, tmp_path / "out.db"),
            UnwrapConfig(log_rows=False),
        )

    assert "processing_row" not in [entry["event"] for entry in logs]


def test_run_migration_verifies_when_requested(tmp_path: Path) -> None:
    """Verification runs after the last table when enabled."""
    source_path = build_source_database(tmp_path / "source.db", {"T": [("a", '"x"')]})

    summary = run_migration(MigrationOptions(source_path, tmp_path / "out.db", verify=True))

    assert summary.verified is True
