"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (authentication, chat,
media, notifications). No business logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError, NotFoundError, ExternalServiceError

Helpers (import from core.helpers):
    - generate_token, parse_int, cap_count

Views (import from core.views):
    - health_check, result_error_response

Note:
    Models are NOT imported here to avoid AppRegistryNotReady errors.
"""

from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
)
from .helpers import cap_count, generate_token, parse_int
from .services import BaseService, ServiceResult

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "NotFoundError",
    "ExternalServiceError",
    # Helpers
    "generate_token",
    "parse_int",
    "cap_count",
]
