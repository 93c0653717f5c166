"""Migration orchestration for a whole database file.

This module validates source and destination paths, owns both
connections for the duration of a run, and drives discovery and
per-table migration. The first failure aborts the run; both
connections are closed on every exit path.
"""

from __future__ import annotations

import sqlite3
from contextlib import ExitStack
from pathlib import Path
from typing import Any

from core.config import UnwrapConfig
from core.errors import UnwrapConfigError
from core.logging_config import get_logger
from core.types import MigrationOptions, MigrationSummary, TableMigrationResult
from migrate.discovery import list_user_tables
from migrate.table_migration import migrate_table
from migrate.verification import verify_migration
from store.sqlite_io import create_destination_database, open_source_database

_LOGGER = get_logger(__name__)


class MigrationRunner:
    """Stateful runner for one source-to-destination migration."""

    def __init__(
        self,
        options: MigrationOptions,
        config: UnwrapConfig | None = None,
        logger: Any | None = None,
    ) -> None:
        self._options = options
        self._config = config or UnwrapConfig()
        self._log = logger or _LOGGER
        self._source_path = Path(options.source_path).expanduser()
        self._destination_path = Path(options.destination_path).expanduser()

    def run(self) -> MigrationSummary:
        """Execute the migration and return per-table row counts."""
        _ensure_distinct_paths(self._source_path, self._destination_path)
        with ExitStack() as stack:
            source = self._open_source()
            stack.callback(source.close)
            destination = self._create_destination()
            stack.callback(destination.close)
            tables = self._discover_tables(source)
            results = self._migrate_tables(tables, source, destination)
            if self._options.verify:
                verify_migration(source, destination)
                self._log.info("migration_verified", tables=len(results))
        summary = MigrationSummary(
            source_path=self._source_path,
            destination_path=self._destination_path,
            tables=results,
            verified=self._options.verify,
        )
        self._log.info(
            "migration_completed",
            tables=summary.table_count,
            rows=summary.row_count,
        )
        return summary

    def _open_source(self) -> sqlite3.Connection:
        self._log.info("loading_source", path=str(self._source_path))
        source = open_source_database(self._source_path)
        self._log.info("source_loaded", path=str(self._source_path))
        return source

    def _create_destination(self) -> sqlite3.Connection:
        self._log.info("creating_destination", path=str(self._destination_path))
        if self._destination_path.exists():
            raise UnwrapConfigError(
                f"Destination {self._destination_path} already exists. "
                "Choose a path that does not exist yet."
            )
        return create_destination_database(self._destination_path)

    def _discover_tables(self, source: sqlite3.Connection) -> tuple[str, ...]:
        self._log.info("discovering_tables")
        tables = list_user_tables(source)
        self._log.info("tables_found", tables=list(tables))
        return tables

    def _migrate_tables(
        self,
        tables: tuple[str, ...],
        source: sqlite3.Connection,
        destination: sqlite3.Connection,
    ) -> tuple[TableMigrationResult, ...]:
        return tuple(
            migrate_table(
                table_name,
                source,
                destination,
                logger=self._log,
                log_rows=self._config.log_rows,
            )
            for table_name in tables
        )


def run_migration(
    options: MigrationOptions,
    config: UnwrapConfig | None = None,
    *,
    logger: Any | None = None,
) -> MigrationSummary:
    """Migrate every user table of ``options.source_path`` into a new file.

    Args:
        options: Source and destination paths.
        config: Optional runtime configuration.
        logger: Optional structured logger for progress events.

    Returns:
        Summary of the completed migration.

    Raises:
        UnwrapError: Subclass naming the failing stage.
    """
    return MigrationRunner(options, config, logger).run()


def _ensure_distinct_paths(source_path: Path, destination_path: Path) -> None:
    """Reject a destination that resolves to the source file.

    Raises:
        UnwrapConfigError: If both paths point at the same file.
    """
    if source_path.resolve() == destination_path.resolve():
        raise UnwrapConfigError(
            f"Source and destination are the same file: {source_path}. "
            "Write the migration to a new path."
        )
