"""
Permission classes for authentication endpoints.

- IsChatAdmin: user has the admin role (or is a superuser)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsChatAdmin(permissions.BasePermission):
    """Allows access only to chat admins."""

    message = "Admin access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_chat_admin)
