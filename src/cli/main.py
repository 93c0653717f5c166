"""Unwrap CLI entry points.

This module maps the command line onto a single migration run.
Migration failures become exit code 1 with a structured error event.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from importlib import metadata
from pathlib import Path
from typing import Sequence

from core.config import UnwrapConfig
from core.constants import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    SUPPORTED_LOG_FORMATS,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import UnwrapError
from core.logging_config import configure_logging, get_logger
from core.types import MigrationOptions
from migrate.runner import run_migration

_LOGGER = get_logger(__name__)
_DISTRIBUTION_NAME = "sqlite-json-unwrap"


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="sqlite-json-unwrap",
        description="Copy an SQLite file, unwrapping over-encoded JSON values",
    )
    parser.add_argument("-i", "--input", required=True, help="SQLite file to migrate")
    parser.add_argument("-o", "--output", required=True, help="SQLite output file")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Compare table names and row counts after migrating",
    )
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override JSONUNWRAP_LOG_LEVEL for this command",
    )
    parser.add_argument(
        "--log-format",
        choices=SUPPORTED_LOG_FORMATS,
        help="Override JSONUNWRAP_LOG_FORMAT for this command",
    )
    parser.add_argument(
        "--no-row-progress",
        action="store_true",
        help="Do not log an event for every migrated row",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Unwrap CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except UnwrapError as error:
        parser.error(str(error))
    configure_logging(config.log_level, config.log_format)
    options = MigrationOptions(
        source_path=Path(args.input),
        destination_path=Path(args.output),
        verify=args.verify,
    )
    try:
        summary = run_migration(options, config)
    except UnwrapError as error:
        _LOGGER.error(
            "migration_failed",
            kind=type(error).__name__,
            table=error.table,
            row_key=error.row_key,
            reason=str(error),
        )
        return EXIT_FAILURE
    print(f"tables_migrated={summary.table_count}")
    print(f"rows_migrated={summary.row_count}")
    return EXIT_SUCCESS


def _build_config(args: argparse.Namespace) -> UnwrapConfig:
    """Build runtime config with CLI overrides applied.

    Raises:
        UnwrapConfigError: If environment values are invalid.
    """
    config = UnwrapConfig.from_env()
    if args.log_level:
        config = replace(config, log_level=args.log_level)
    if args.log_format:
        config = replace(config, log_format=args.log_format)
    if args.no_row_progress:
        config = replace(config, log_rows=False)
    return config


def _version() -> str:
    try:
        return metadata.version(_DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "0+unknown"
