"""Per-table copy with JSON unwrapping.

This module creates one destination table, streams the matching source
rows through the normalizer, and inserts each result as its own
statement. A failure mid-table leaves already inserted rows in place.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Any, Iterator

from core.constants import DESTINATION_COLUMN_TYPE, ID_COLUMN, JSON_COLUMN
from core.errors import (
    UnwrapMalformedInputError,
    UnwrapReadError,
    UnwrapSchemaError,
    UnwrapWriteError,
)
from core.logging_config import get_logger
from core.types import NormalizedRow, SourceRow, TableMigrationResult
from store.sqlite_io import quote_identifier
from transforms.json_unwrap import normalize_json_value

_LOGGER = get_logger(__name__)


def migrate_table(
    table_name: str,
    source: sqlite3.Connection,
    destination: sqlite3.Connection,
    *,
    logger: Any | None = None,
    log_rows: bool = True,
) -> TableMigrationResult:
    """Copy one table into the destination, unwrapping every JSON value.

    Args:
        table_name: Source table to copy.
        source: Source database connection.
        destination: Destination database connection.
        logger: Optional structured logger for progress events.
        log_rows: Emit one progress event per row.

    Returns:
        Number of rows written.

    Raises:
        UnwrapSchemaError: If the destination table cannot be created.
        UnwrapReadError: If source rows cannot be read.
        UnwrapMalformedInputError: If a stored value is not valid JSON.
        UnwrapWriteError: If a row cannot be inserted.
    """
    log = logger or _LOGGER
    log.info("processing_table", table=table_name)
    create_destination_table(destination, table_name)
    row_count = 0
    with closing(iter_source_rows(source, table_name)) as source_rows:
        for source_row in source_rows:
            if log_rows:
                log.info("processing_row", table=table_name, row_key=source_row.row_id)
            normalized_row = normalize_row(table_name, source_row)
            insert_row(destination, table_name, normalized_row)
            row_count += 1
    log.info("table_migrated", table=table_name, rows=row_count)
    return TableMigrationResult(table_name=table_name, row_count=row_count)


def create_destination_table(destination: sqlite3.Connection, table_name: str) -> None:
    """Create the fixed ``(ID TEXT, json TEXT)`` table.

    Raises:
        UnwrapSchemaError: If the table exists or the statement fails.
    """
    statement = (
        f"CREATE TABLE {quote_identifier(table_name)} ("
        f"{ID_COLUMN} {DESTINATION_COLUMN_TYPE}, "
        f"{JSON_COLUMN} {DESTINATION_COLUMN_TYPE})"
    )
    try:
        destination.execute(statement)
    except (sqlite3.Error, ValueError) as error:
        raise UnwrapSchemaError(
            f"Failed to create destination table '{table_name}': {error}.",
            table=table_name,
        ) from error


def iter_source_rows(source: sqlite3.Connection, table_name: str) -> Iterator[SourceRow]:
    """Stream ``(ID, json)`` rows from a source table in cursor order.

    Raises:
        UnwrapReadError: If the query or a fetch fails.
        UnwrapMalformedInputError: If a row has no JSON value.
    """
    query = (
        f"SELECT {ID_COLUMN}, {JSON_COLUMN} "
        f"FROM {quote_identifier(table_name)}"
    )
    try:
        cursor = source.execute(query)
    except (sqlite3.Error, ValueError) as error:
        raise UnwrapReadError(
            f"Failed to read rows from '{table_name}': {error}.",
            table=table_name,
        ) from error
    try:
        while True:
            try:
                row = cursor.fetchone()
            except sqlite3.Error as error:
                raise UnwrapReadError(
                    f"Failed to read rows from '{table_name}': {error}.",
                    table=table_name,
                ) from error
            if row is None:
                return
            yield _build_source_row(table_name, row)
    finally:
        cursor.close()


def normalize_row(table_name: str, source_row: SourceRow) -> NormalizedRow:
    """Unwrap one row, attaching table and key to any failure."""
    try:
        value = normalize_json_value(source_row.raw_value)
    except UnwrapMalformedInputError as error:
        raise UnwrapMalformedInputError(
            f"Row '{source_row.row_id}' in '{table_name}': {error}",
            table=table_name,
            row_key=source_row.row_id,
        ) from error
    return NormalizedRow(row_id=source_row.row_id, value=value)


def insert_row(
    destination: sqlite3.Connection,
    table_name: str,
    normalized_row: NormalizedRow,
) -> None:
    """Insert one normalized row as its own statement.

    Raises:
        UnwrapWriteError: If the insert fails.
    """
    statement = (
        f"INSERT INTO {quote_identifier(table_name)} "
        f"({ID_COLUMN}, {JSON_COLUMN}) VALUES (?, ?)"
    )
    try:
        destination.execute(statement, (normalized_row.row_id, normalized_row.value))
    except (sqlite3.Error, UnicodeEncodeError) as error:
        raise UnwrapWriteError(
            f"Failed to insert row '{normalized_row.row_id}' into '{table_name}': {error}.",
            table=table_name,
            row_key=normalized_row.row_id,
        ) from error


def _build_source_row(table_name: str, row: tuple[Any, Any]) -> SourceRow:
    raw_id, raw_value = row
    if raw_id is None:
        raise UnwrapReadError(f"Row in '{table_name}' has a NULL {ID_COLUMN}.", table=table_name)
    try:
        row_id = _as_text(raw_id)
    except UnicodeDecodeError as error:
        raise UnwrapReadError(
            f"Row in '{table_name}' has a non UTF-8 {ID_COLUMN}.", table=table_name
        ) from error
    if raw_value is None:
        raise UnwrapMalformedInputError(
            f"Row '{row_id}' in '{table_name}' has a NULL {JSON_COLUMN} value.",
            table=table_name,
            row_key=row_id,
        )
    try:
        return SourceRow(row_id=row_id, raw_value=_as_text(raw_value))
    except UnicodeDecodeError as error:
        raise UnwrapMalformedInputError(
            f"Row '{row_id}' in '{table_name}' stores a non UTF-8 blob.",
            table=table_name,
            row_key=row_id,
        ) from error


def _as_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)
