"""Post-migration consistency checks.

This module compares a finished destination file against its source:
both must expose the same user tables with the same row counts and
the same row keys.
"""

from __future__ import annotations

import sqlite3
from typing import Iterator

from core.constants import ID_COLUMN
from core.errors import UnwrapVerificationError
from core.types import TableMigrationResult
from migrate.discovery import list_user_tables
from store.sqlite_io import quote_identifier


def verify_migration(
    source: sqlite3.Connection,
    destination: sqlite3.Connection,
) -> tuple[TableMigrationResult, ...]:
    """Check that table sets, row counts and row keys are preserved.

    Args:
        source: Source database connection.
        destination: Destination database connection.

    Returns:
        Verified per-table row counts in source catalog order.

    Raises:
        UnwrapVerificationError: If tables, row counts or row keys differ.
    """
    source_tables = list_user_tables(source)
    destination_tables = list_user_tables(destination)
    missing = sorted(set(source_tables) - set(destination_tables))
    unexpected = sorted(set(destination_tables) - set(source_tables))
    if missing or unexpected:
        raise UnwrapVerificationError(
            "Destination tables do not match source tables: "
            f"missing={missing}, unexpected={unexpected}."
        )
    results: list[TableMigrationResult] = []
    for table_name in source_tables:
        source_count = count_rows(source, table_name)
        destination_count = count_rows(destination, table_name)
        if source_count != destination_count:
            raise UnwrapVerificationError(
                f"Row count mismatch for '{table_name}': "
                f"source={source_count}, destination={destination_count}.",
                table=table_name,
            )
        _compare_row_keys(source, destination, table_name)
        results.append(TableMigrationResult(table_name=table_name, row_count=source_count))
    return tuple(results)


def count_rows(connection: sqlite3.Connection, table_name: str) -> int:
    """Count rows in one table.

    Raises:
        UnwrapVerificationError: If the table cannot be counted.
    """
    try:
        row = connection.execute(
            f"SELECT count(*) FROM {quote_identifier(table_name)}"
        ).fetchone()
    except sqlite3.Error as error:
        raise UnwrapVerificationError(
            f"Failed to count rows in '{table_name}': {error}.",
            table=table_name,
        ) from error
    return int(row[0])


def _compare_row_keys(
    source: sqlite3.Connection,
    destination: sqlite3.Connection,
    table_name: str,
) -> None:
    """Walk both tables in key order and stop at the first differing ``ID``.

    Row counts are checked beforehand, so both cursors yield the same
    number of keys. Keys are compared as text because destination ``ID``
    columns are ``TEXT`` while source columns may hold numbers.

    Raises:
        UnwrapVerificationError: If the key multisets differ.
    """
    source_keys = _iter_row_keys(source, table_name)
    destination_keys = _iter_row_keys(destination, table_name)
    for source_key, destination_key in zip(source_keys, destination_keys):
        if source_key != destination_key:
            raise UnwrapVerificationError(
                f"Row key mismatch for '{table_name}': source has '{source_key}', "
                f"destination has '{destination_key}'.",
                table=table_name,
                row_key=source_key,
            )


def _iter_row_keys(connection: sqlite3.Connection, table_name: str) -> Iterator[str]:
    key = f"CAST({ID_COLUMN} AS TEXT)"
    try:
        cursor = connection.execute(
            f"SELECT {key} FROM {quote_identifier(table_name)} ORDER BY {key}"
        )
        for row in cursor:
            yield row[0]
    except sqlite3.Error as error:
        raise UnwrapVerificationError(
            f"Failed to read row keys from '{table_name}': {error}.",
            table=table_name,
        ) from error
