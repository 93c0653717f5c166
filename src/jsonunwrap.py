"""Public SDK surface for Unwrap.

This module provides a stable import path for library users.
It re-exports the migration entry points, typed models, and errors.
"""

from __future__ import annotations

from core.config import UnwrapConfig
from core.errors import (
    UnwrapConfigError,
    UnwrapConnectionError,
    UnwrapDiscoveryError,
    UnwrapError,
    UnwrapMalformedInputError,
    UnwrapReadError,
    UnwrapSchemaError,
    UnwrapVerificationError,
    UnwrapWriteError,
)
from core.types import MigrationOptions, MigrationSummary, TableMigrationResult, UnwrappedValue
from migrate.discovery import list_user_tables
from migrate.runner import MigrationRunner, run_migration
from migrate.table_migration import migrate_table
from migrate.verification import verify_migration
from transforms.json_unwrap import normalize_json_value, unwrap_json_string

__all__ = [
    "MigrationOptions",
    "MigrationRunner",
    "MigrationSummary",
    "TableMigrationResult",
    "UnwrapConfig",
    "UnwrapConfigError",
    "UnwrapConnectionError",
    "UnwrapDiscoveryError",
    "UnwrapError",
    "UnwrapMalformedInputError",
    "UnwrapReadError",
    "UnwrapSchemaError",
    "UnwrapVerificationError",
    "UnwrapWriteError",
    "UnwrappedValue",
    "list_user_tables",
    "migrate_table",
    "normalize_json_value",
    "run_migration",
    "unwrap_json_string",
    "verify_migration",
]
