"""Exception classes for the cosmic_sdk package.

This module defines custom exceptions used throughout the cosmic_sdk package
for better error handling and debugging.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class CosmicException(Exception):
    """Base exception for all Cosmic SDK errors.

    This is the base class for all exceptions raised by the cosmic_sdk package.
    Catching this exception will catch all cosmic_sdk-specific errors.
    """
    pass


class ConfigurationError(CosmicException):
    """Raised when the client configuration is incomplete.

    This can occur due to:
    - Missing bucket slug or read key
    - An unparseable timeout value in the environment
    """
    pass


class TransportError(CosmicException):
    """Raised when the HTTP request could not be completed.

    This can occur due to:
    - Network connectivity issues
    - DNS or TLS failures
    - The request timing out
    """
    pass


class DecodingError(CosmicException):
    """Raised when a response body does not match the expected shape.

    The raw response bytes are kept on ``raw_body`` for diagnostics.
    """

    def __init__(self, message: str, raw_body: Optional[bytes] = None):
        super().__init__(message)
        self.raw_body = raw_body


class ValueDecodingError(CosmicException, ValueError):
    """Raised when a JSON node cannot be represented by the SDK models."""
    pass


class MissingIdentifierError(CosmicException, ValueError):
    """Raised when a per-id operation is resolved without an id.

    No request is sent when this is raised.
    """

    def __init__(self, operation: str):
        super().__init__(f"Operation '{operation}' requires a non-empty id")
        self.operation = operation


class MissingWriteKeyError(CosmicException):
    """Raised when a write operation is attempted without a write key."""

    def __init__(self, operation: str):
        super().__init__(f"Operation '{operation}' requires a write key")
        self.operation = operation


class RemoteErrorType(str, Enum):
    """Error categories reported by the service in its error envelope."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"

    @classmethod
    def known(cls, value: Any) -> Optional["RemoteErrorType"]:
        """Return the member for ``value``, or None if it is not a known type."""
        if isinstance(value, str) and value in cls._value2member_map_:
            return cls(value)
        return None

    @classmethod
    def from_status(cls, status: int) -> "RemoteErrorType":
        if status in (401, 403):
            return cls.INVALID_CREDENTIALS
        if status == 404:
            return cls.NOT_FOUND
        if status in (400, 422):
            return cls.VALIDATION_ERROR
        if status == 429:
            return cls.RATE_LIMIT_EXCEEDED
        if status >= 500:
            return cls.SERVER_ERROR
        return cls.UNKNOWN


class RemoteError(CosmicException):
    """Raised when the service answers with an error status.

    Attributes:
        status: HTTP status code (or the envelope's ``status`` if present)
        error_type: Parsed ``type`` field of the error envelope
        details: Optional ``details`` object from the envelope
        raw_body: Raw response bytes
    """

    def __init__(
        self,
        status: int,
        error_type: RemoteErrorType,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        raw_body: Optional[bytes] = None,
    ):
        super().__init__(f"[{status} {error_type.value}] {message}")
        self.status = status
        self.error_type = error_type
        self.message = message
        self.details = details
        self.raw_body = raw_body
