"""SQLite connection helpers.

This module isolates how source and destination database files are
opened so the migration runner only deals with typed failures.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from core.errors import UnwrapConnectionError


def open_source_database(source_path: Path) -> sqlite3.Connection:
    """Open an existing SQLite file read-only and probe its catalog.

    Args:
        source_path: Database file to migrate.

    Returns:
        Read-only connection.

    Raises:
        UnwrapConnectionError: If the file is missing or not a database.
    """
    uri = f"{source_path.resolve().as_uri()}?mode=ro"
    try:
        connection = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as error:
        raise UnwrapConnectionError(
            f"Failed to open source database {source_path}: {error}. "
            "Provide an existing SQLite file."
        ) from error
    try:
        connection.execute("SELECT count(*) FROM sqlite_master").fetchone()
    except sqlite3.Error as error:
        connection.close()
        raise UnwrapConnectionError(
            f"Source {source_path} is not a readable SQLite database: {error}."
        ) from error
    return connection


def create_destination_database(destination_path: Path) -> sqlite3.Connection:
    """Create the destination SQLite file in autocommit mode.

    Every statement is committed on its own, so rows inserted before a
    failure stay in the destination file.

    Args:
        destination_path: File to create. Must not exist yet.

    Returns:
        Writable autocommit connection.

    Raises:
        UnwrapConnectionError: If the file cannot be created.
    """
    try:
        return sqlite3.connect(str(destination_path), isolation_level=None)
    except sqlite3.Error as error:
        raise UnwrapConnectionError(
            f"Failed to create destination database {destination_path}: {error}."
        ) from error


def quote_identifier(name: str) -> str:
    """Quote a table or column name for use in SQL text."""
    return '"' + name.replace('"', '""') + '"'
