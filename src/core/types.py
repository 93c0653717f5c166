"""Shared typed models.

This module defines immutable data models used by the normalizer,
table pipeline, runner, and CLI to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class MigrationOptions:
    """User-facing migration options.

    Attributes:
        source_path: Existing SQLite file to read.
        destination_path: New SQLite file to create.
        verify: Compare table names and row counts after migrating.
    """

    source_path: Path
    destination_path: Path
    verify: bool = False


@dataclass(frozen=True)
class SourceRow:
    """One ``(ID, json)`` row read from a source table.

    Attributes:
        row_id: Textual row key.
        raw_value: Stored JSON text, possibly encoded several times.
    """

    row_id: str
    raw_value: str


@dataclass(frozen=True)
class NormalizedRow:
    """One row ready to insert into a destination table."""

    row_id: str
    value: str


@dataclass(frozen=True)
class UnwrappedValue:
    """Innermost text of an over-encoded JSON value.

    Attributes:
        value: Text left after removing every string layer.
        depth: Number of JSON string layers removed.
    """

    value: str
    depth: int


@dataclass(frozen=True)
class TableMigrationResult:
    """Row count for one migrated table."""

    table_name: str
    row_count: int


@dataclass(frozen=True)
class MigrationSummary:
    """Outcome of a fully successful migration run.

    Attributes:
        source_path: Migrated source file.
        destination_path: Created destination file.
        tables: Per-table results in processing order.
        verified: Whether post-run verification was executed.
    """

    source_path: Path
    destination_path: Path
    tables: tuple[TableMigrationResult, ...]
    verified: bool = False

    @property
    def table_count(self) -> int:
        """Count migrated tables."""
        return len(self.tables)

    @property
    def row_count(self) -> int:
        """Count migrated rows across all tables."""
        return sum(table.row_count for table in self.tables)
