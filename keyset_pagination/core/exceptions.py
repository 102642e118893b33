"""Pagination exceptions.

Custom exceptions raised by the pagination engine. They carry a message plus
a ``details`` mapping so callers (API layers, GraphQL resolvers) can render a
structured error without parsing strings.

Errors raised by the database driver or SQLAlchemy are never wrapped here;
they propagate unchanged from ``AsyncSession.execute``.
"""
from __future__ import annotations

from typing import Any


class PaginationError(Exception):
    """Base exception for pagination operations.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize pagination error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidPageOptionsError(PaginationError, ValueError):
    """Page window options are invalid.

    Raised before any query executes when ``first`` and ``last`` are both
    supplied, neither is supplied, a size is not a positive integer, or a
    size exceeds the configured maximum.
    """

    def __init__(self, message: str, **details: Any):
        super().__init__(message, details=details)


class MalformedCursorError(PaginationError, ValueError):
    """Cursor token cannot be decoded into a position.

    The engine never attempts partial recovery: a cursor that is not valid
    base64, not a JSON array, contains an unknown type tag, or has the wrong
    number of values for the paginator's ordering is rejected outright.

    Attributes:
        cursor: The offending token
    """

    def __init__(self, cursor: str, reason: str):
        """Initialize malformed cursor error.

        Args:
            cursor: The token that failed to decode
            reason: Why decoding failed
        """
        self.cursor = cursor
        self.reason = reason
        super().__init__(f"Malformed cursor: {reason}", details={"cursor": cursor})

    def __repr__(self) -> str:
        return f"MalformedCursorError(cursor={self.cursor!r}, reason={self.reason!r})"


class UnknownColumnError(PaginationError):
    """Ordering column does not map to any known column.

    Only raised when strict column resolution is enabled
    (``PAGINATION_STRICT_COLUMNS=true``). In tolerant mode the name is
    treated as a literal column of the statement's base alias instead.
    """

    def __init__(self, column: str, alias: str):
        self.column = column
        self.alias = alias
        super().__init__(
            f"Unknown ordering column {column!r}",
            details={"column": column, "alias": alias},
        )


__all__ = [
    "InvalidPageOptionsError",
    "MalformedCursorError",
    "PaginationError",
    "UnknownColumnError",
]
