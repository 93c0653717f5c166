"""Over-encoded JSON unwrapping transform.

This module strips repeated JSON string encoding from stored values.
A value serialized N times as a JSON string is decoded back to the text
that was serialized first.
"""

from __future__ import annotations

import json
from typing import Any

from core.errors import UnwrapMalformedInputError
from core.types import UnwrappedValue

_NOT_DECODED = object()
_NOT_STRING = object()


def normalize_json_value(raw: str) -> str:
    """Return the innermost text of a possibly multiply-encoded JSON string.

    Args:
        raw: Stored JSON text.

    Returns:
        Fully unwrapped text.

    Raises:
        UnwrapMalformedInputError: If ``raw`` itself is not valid JSON.
    """
    return unwrap_json_string(raw).value


def unwrap_json_string(raw: str) -> UnwrappedValue:
    """Decode JSON string layers until the text stops decoding to a string.

    The first decode must succeed. Every later decode that fails or yields
    a non-string value ends the loop and the current text is returned as-is.

    Args:
        raw: Stored JSON text.

    Returns:
        Unwrapped text together with the number of layers removed.

    Raises:
        UnwrapMalformedInputError: If ``raw`` itself is not valid JSON.
    """
    decoded = _decode_json(raw)
    if decoded is _NOT_DECODED:
        raise UnwrapMalformedInputError(
            f"Stored value is not valid JSON: {_preview(raw)!r}."
        )
    if not isinstance(decoded, str):
        return UnwrappedValue(value=raw, depth=0)
    current = decoded
    depth = 1
    while True:
        decoded = _decode_json(current)
        if not isinstance(decoded, str):
            return UnwrappedValue(value=current, depth=depth)
        current = decoded
        depth += 1


def _decode_json(text: str) -> Any:
    """Decode strict JSON, returning ``_NOT_DECODED`` on failure.

    Containers nested deeper than the interpreter recursion limit are
    reported as an opaque non-string value. Strings holding lone
    surrogates cannot be stored as UTF-8 and count as a failed decode.
    """
    try:
        decoded = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return _NOT_DECODED
    except RecursionError:
        return _NOT_STRING
    if isinstance(decoded, str) and not _is_utf8_encodable(decoded):
        return _NOT_DECODED
    return decoded


def _is_utf8_encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _preview(text: str, limit: int = 80) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."

