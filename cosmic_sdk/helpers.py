"""Helper functions for the cosmic_sdk package.

This module contains small pure utilities used across the package:
blank-value detection, URL inspection, timestamp canonicalisation and
MIME type guessing for uploads.
"""
from __future__ import annotations

import mimetypes
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .exceptions import ValueDecodingError

SECRET_PARAMS = ("read_key", "write_key")


def is_blank(value: Any) -> bool:
    """Return True for None, empty strings and whitespace-only strings.

    Example:
        >>> is_blank("  ")
        True
        >>> is_blank(0)
        False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_absolute_url(path: str) -> bool:
    """Return True if ``path`` carries its own scheme and host."""
    parts = urlsplit(path)
    return bool(parts.scheme and parts.netloc)


def canonical_timestamp(value: Any) -> Optional[str]:
    """Normalise a timestamp sent as a JSON string or number into a string.

    The service sends ``published_at`` and friends either as ISO strings or as
    epoch numbers depending on the API version.

    Args:
        value: Decoded JSON value (str, int, float or None)

    Returns:
        Canonical string, or None when the value is absent

    Raises:
        ValueDecodingError: If the value is neither a string nor a number

    Example:
        >>> canonical_timestamp(1700000000)
        '1700000000'
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueDecodingError(f"Expected string or number timestamp, got bool {value!r}")
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    raise ValueDecodingError(f"Expected string or number timestamp, got {type(value).__name__}")


def guess_mime_type(filename: str) -> str:
    """Guess the upload content type from a filename, defaulting to octet-stream."""
    mime, _ = mimetypes.guess_type(filename)
    return mime or "application/octet-stream"


def redact_url(url: str) -> str:
    """Mask credential query parameters so URLs can be logged."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (k, "***" if k in SECRET_PARAMS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))
