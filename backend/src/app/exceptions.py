"""Custom exception classes for the application.

This module provides domain-specific exception classes that carry
appropriate status codes and structured error information.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    Each exception carries a status code and optional details.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP-style status code (default 500).
        detail: Optional additional context.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a response body."""
        result: dict[str, Any] = {"error": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ConfigurationError(AppError):
    """Raised when required configuration is missing or invalid.

    Fatal at bootstrap: the process instance never begins serving.
    """

    def __init__(
        self,
        config_name: str,
        detail: Optional[str] = None,
        missing: bool = True,
    ):
        reason = "Missing required" if missing else "Invalid"
        super().__init__(
            f"{reason} configuration: {config_name}",
            status_code=500,
            detail=detail,
        )
        self.config_name = config_name


class DatabaseError(AppError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message,
            status_code=500,
            detail=detail,
        )


class DatabaseConnectionError(DatabaseError):
    """Raised when the database session cannot be established.

    Covers malformed URLs, unknown drivers, unreachable hosts and
    authentication failures. Fatal at bootstrap.
    """


class WriteError(DatabaseError):
    """Raised when the single write attempt of an invocation fails.

    The invocation is reported as failed; the process keeps serving.
    """


class MalformedInputWarning(UserWarning):
    """Issued when an optional input field is present but invalid.

    The record is built with a default value and the invocation proceeds.
    """
