"""
Custom exceptions and error codes for the graph module.

Two reporting channels exist:
- Exceptions (below) for caller contract violations and for failures
  the Client cannot express as a return value.
- ErrorCode values recorded on the Client for routine remote outcomes
  (missing entity, conflict, bad request).

Exception names avoid shadowing Python builtins (ConnectionError).
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Remote outcome codes recorded as ``Client.last_error``.

    Values mirror the HTTP status that produced them; UNKNOWN covers
    every other unexpected status.
    """

    BAD_REQUEST = 400
    NOT_FOUND = 404
    CONFLICT = 409
    UNKNOWN = 500

    @classmethod
    def from_status(cls, status: int) -> ErrorCode:
        """Map an HTTP status code to an ErrorCode."""
        try:
            return cls(int(status))
        except (TypeError, ValueError):
            return cls.UNKNOWN


class Neo4jError(Exception):
    """Base exception for all Neo4j-related errors."""

    pass


class Neo4jUsageError(Neo4jError):
    """Raised when a call violates the Client's contract.

    Always raised before any request is sent: missing identities,
    relationships without endpoints or type, invalid path finders.
    """

    pass


class Neo4jServerError(Neo4jError):
    """Raised when a metadata lookup gets an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with message and the offending status.

        Args:
            message: Human-readable error description
            status_code: HTTP status returned by the server
        """
        super().__init__(message)
        self.status_code = status_code


class Neo4jConnectionError(Neo4jError):
    """Raised when the HTTP transport cannot complete a request.

    Named Neo4jConnectionError to avoid shadowing Python's
    built-in ConnectionError.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize with message and optional cause.

        Args:
            message: Human-readable error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class Neo4jResponseError(Neo4jError):
    """Raised when a response body cannot be decoded as JSON."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body
