"""
Service layer primitives shared by every domain app.

- ServiceResult: explicit success/failure value returned by services
- BaseService: per-service logger and transaction helper

Views translate a failed ServiceResult into an HTTP response using its
error_code (see core.views.result_error_response).

Usage:
    from core.services import BaseService, ServiceResult

    class RoomService(BaseService):
        @classmethod
        def create_room(cls, name: str) -> ServiceResult[Room]:
            if Room.objects.filter(name__iexact=name).exists():
                return ServiceResult.failure(
                    "Room name already exists", error_code="ROOM_EXISTS"
                )
            with cls.atomic():
                room = Room.objects.create(name=name)
            cls.get_logger().info(f"Created room {room.id}")
            return ServiceResult.success(room)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Result wrapper for service operations.

    Use for expected failures (business rules, missing records, conflicts).
    Unexpected failures still raise.

    Attributes:
        success: Whether the operation succeeded
        data: Result payload when successful
        error: Human-readable error message
        error_code: Machine-readable code, mapped to an HTTP status by views
        errors: Optional field-level errors
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """Alias for success()."""
        return cls(success=True, data=data)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Example:
            return ServiceResult.failure("Parent message not found", "MESSAGE_NOT_FOUND")
        """
        return cls(success=False, error=error, error_code=error_code, errors=errors)

    def to_response(self) -> dict[str, Any]:
        """
        Convert to an API response body.

        Failed results render as {"error": ..., "error_code": ...} so every
        endpoint reports business-rule failures in the same shape.
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {"error": self.error}
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for stateless service classes.

    Services expose classmethods, return ServiceResult for expected
    failures and raise for unexpected ones.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the concrete service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Run the enclosed block in a database transaction.

        Thin wrapper around transaction.atomic() that keeps transaction
        boundaries visible in service code.
        """
        with transaction.atomic():
            yield
