"""Runtime configuration model for Unwrap.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    FALSE_WORDS,
    LOG_FORMAT_ENV,
    LOG_LEVEL_ENV,
    LOG_ROWS_ENV,
    SUPPORTED_LOG_FORMATS,
    SUPPORTED_LOG_LEVELS,
    TRUE_WORDS,
)
from core.errors import UnwrapConfigError


@dataclass(frozen=True)
class UnwrapConfig:
    """Validated runtime configuration.

    Attributes:
        log_level: Minimum level for emitted log events.
        log_format: ``json`` for machine-readable lines, ``console`` for humans.
        log_rows: Whether a progress event is emitted for every row.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    log_rows: bool = True

    @classmethod
    def from_env(cls) -> "UnwrapConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            UnwrapConfigError: If environment values are invalid.
        """
        log_level = _parse_choice(
            LOG_LEVEL_ENV,
            os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
            SUPPORTED_LOG_LEVELS,
        )
        log_format = _parse_choice(
            LOG_FORMAT_ENV,
            os.getenv(LOG_FORMAT_ENV, DEFAULT_LOG_FORMAT),
            SUPPORTED_LOG_FORMATS,
        )
        log_rows = _parse_flag(LOG_ROWS_ENV, os.getenv(LOG_ROWS_ENV, "true"))
        return cls(log_level=log_level, log_format=log_format, log_rows=log_rows)


def _parse_choice(name: str, raw_value: str, choices: tuple[str, ...]) -> str:
    """Normalize and validate an enumerated setting.

    Args:
        name: Setting name used in the error message.
        raw_value: Raw string from environment or CLI.
        choices: Accepted lowercase values.

    Returns:
        Lowercased accepted value.

    Raises:
        UnwrapConfigError: If value is not one of ``choices``.
    """
    value = raw_value.strip().lower()
    if value not in choices:
        raise UnwrapConfigError(
            f"Invalid {name} value: expected one of {choices}, got '{raw_value}'."
        )
    return value


def _parse_flag(name: str, raw_value: str) -> bool:
    """Parse a boolean environment value.

    Raises:
        UnwrapConfigError: If value is not a recognized boolean word.
    """
    value = raw_value.strip().lower()
    if value in TRUE_WORDS:
        return True
    if value in FALSE_WORDS:
        return False
    raise UnwrapConfigError(
        f"Invalid {name} value: expected one of {TRUE_WORDS + FALSE_WORDS}, "
        f"got '{raw_value}'."
    )
