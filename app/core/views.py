"""
Core views providing infrastructure endpoints and response helpers.

health_check is mounted at /health/ for load balancers and container probes.
result_error_response turns a failed ServiceResult into a DRF Response.
"""

from __future__ import annotations

import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

# Error codes that do not follow the *_NOT_FOUND / *_EXISTS naming
ERROR_CODE_STATUS = {
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_OWNER": status.HTTP_403_FORBIDDEN,
    "STORAGE_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def status_for_error_code(error_code: str | None) -> int:
    """
    Map a service error code to an HTTP status.

    *_NOT_FOUND -> 404, *_EXISTS and DUPLICATE -> 409, explicit entries in
    ERROR_CODE_STATUS, anything else -> 400.
    """
    if not error_code:
        return status.HTTP_400_BAD_REQUEST
    if error_code in ERROR_CODE_STATUS:
        return ERROR_CODE_STATUS[error_code]
    if error_code.endswith("NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if error_code.endswith("_EXISTS") or error_code == "DUPLICATE":
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def result_error_response(result) -> Response:
    """Build the error Response for a failed ServiceResult."""
    return Response(result.to_response(), status=status_for_error_code(result.error_code))


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable (cache failures only degrade)
        503: Database unreachable
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check: cache unreachable")
        health_status["cache"] = "disconnected"

    return JsonResponse(health_status, status=200 if is_healthy else 503)
