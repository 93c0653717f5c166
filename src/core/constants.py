"""Core constants used across Unwrap modules.

This module centralizes table layout names and configuration defaults.
Keeping values here avoids magic literals in migration logic.
"""

from __future__ import annotations

RESERVED_TABLE_PREFIX = "sqlite_"
ID_COLUMN = "ID"
JSON_COLUMN = "json"
DESTINATION_COLUMN_TYPE = "TEXT"
LOG_LEVEL_ENV = "JSONUNWRAP_LOG_LEVEL"
LOG_FORMAT_ENV = "JSONUNWRAP_LOG_FORMAT"
LOG_ROWS_ENV = "JSONUNWRAP_LOG_ROWS"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_FORMAT = "json"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
SUPPORTED_LOG_FORMATS = ("json", "console")
TRUE_WORDS = ("1", "true", "yes", "on")
FALSE_WORDS = ("0", "false", "no", "off")
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
