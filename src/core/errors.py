"""Unwrap exception hierarchy.

This module defines traceable migration errors with clear boundaries.
Each stage raises a specific error type so callers can tell failures apart
without parsing diagnostic text.
"""

from __future__ import annotations


class UnwrapError(Exception):
    """Base exception for all migration failures.

    Attributes:
        table: Table being processed when the failure happened, if any.
        row_key: ``ID`` of the row being processed, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        row_key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.row_key = row_key


class UnwrapConfigError(UnwrapError):
    """Raised for invalid paths or runtime configuration."""


class UnwrapConnectionError(UnwrapError):
    """Raised when a database file cannot be opened or created."""


class UnwrapDiscoveryError(UnwrapError):
    """Raised when the source catalog cannot be read."""


class UnwrapSchemaError(UnwrapError):
    """Raised when a destination table cannot be created."""


class UnwrapReadError(UnwrapError):
    """Raised when source rows cannot be read."""


class UnwrapMalformedInputError(UnwrapError):
    """Raised when a stored value is not valid JSON."""


class UnwrapWriteError(UnwrapError):
    """Raised when a normalized row cannot be inserted."""


class UnwrapVerificationError(UnwrapError):
    """Raised when a finished migration does not match its source."""
