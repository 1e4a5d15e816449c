"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── NotFoundError - Resource not found
    └── ExternalServiceError - Third-party service failures (object storage)

Usage:
    from core.exceptions import ExternalServiceError

    try:
        client.put_object(...)
    except ClientError as e:
        raise ExternalServiceError(
            "Object storage unavailable",
            error_code="STORAGE_ERROR",
            details={"service": "r2"},
        ) from e

Note:
    Expected business-rule failures are returned as ServiceResult.failure.
    These exceptions are for paths where the caller cannot continue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {"error": "Object not found", "error_code": "FILE_NOT_FOUND"}
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Used for single-resource lookups where existence is expected, such as
    fetching a stored object by key.
    """

    default_error_code: str = "NOT_FOUND"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error but don't expose provider internals to clients.
    HTTP 502 Bad Gateway is the appropriate status.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
