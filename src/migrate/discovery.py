"""Source table discovery."""

from __future__ import annotations

import sqlite3

from core.constants import RESERVED_TABLE_PREFIX
from core.errors import UnwrapDiscoveryError

_USER_TABLES_QUERY = (
    "SELECT name FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE ? ESCAPE '\\'"
)


def list_user_tables(connection: sqlite3.Connection) -> tuple[str, ...]:
    """List user-created tables in catalog order.

    Tables whose names start with ``sqlite_`` belong to the engine and
    are excluded.

    Args:
        connection: Open source database connection.

    Returns:
        Table names.

    Raises:
        UnwrapDiscoveryError: If the catalog cannot be read.
    """
    pattern = RESERVED_TABLE_PREFIX.replace("_", "\\_") + "%"
    try:
        rows = connection.execute(_USER_TABLES_QUERY, (pattern,)).fetchall()
    except sqlite3.Error as error:
        raise UnwrapDiscoveryError(f"Failed to read source catalog: {error}.") from error
    return tuple(str(row[0]) for row in rows)
