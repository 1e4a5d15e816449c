"""
OneSignal REST client.

Sends push notifications to a list of player ids and reports which ids
OneSignal rejected, so the caller can invalidate those devices.

Usage:
    from notifications.onesignal import OneSignalClient

    client = OneSignalClient()
    if client.is_configured:
        response = client.send(player_ids, heading="Hi", content="...", data={...})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

ONESIGNAL_API_URL = "https://onesignal.com/api/v1/notifications"
ONESIGNAL_TIMEOUT_SECONDS = 10.0


class OneSignalError(Exception):
    """Raised when OneSignal rejects a request or cannot be reached."""

    def __init__(self, message: str, code: str, is_permanent: bool = False):
        super().__init__(message)
        self.code = code
        self.is_permanent = is_permanent


@dataclass
class OneSignalResponse:
    """Accepted notification: provider id plus any rejected player ids."""

    notification_id: str | None
    invalid_player_ids: list[str] = field(default_factory=list)


class OneSignalClient:
    """Thin synchronous wrapper around the create-notification endpoint."""

    def __init__(
        self,
        app_id: str | None = None,
        api_key: str | None = None,
        timeout: float = ONESIGNAL_TIMEOUT_SECONDS,
    ):
        self.app_id = app_id if app_id is not None else settings.ONESIGNAL_APP_ID
        self.api_key = api_key if api_key is not None else settings.ONESIGNAL_REST_API_KEY
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.api_key)

    def build_payload(
        self,
        player_ids: list[str],
        heading: str,
        content: str,
        data: dict[str, Any] | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "app_id": self.app_id,
            "include_player_ids": player_ids,
            "headings": {"en": heading},
            "contents": {"en": content},
        }
        if data:
            payload["data"] = data
        if url:
            payload["url"] = url
        return payload

    def send(
        self,
        player_ids: list[str],
        heading: str,
        content: str,
        data: dict[str, Any] | None = None,
        url: str | None = None,
    ) -> OneSignalResponse:
        """
        Send a push notification.

        Raises:
            OneSignalError: permanent for 4xx responses, transient for 5xx,
                timeouts and connection errors
        """
        payload = self.build_payload(player_ids, heading, content, data, url)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self.api_key}",
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(ONESIGNAL_API_URL, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"OneSignal API error: {status_code} - {e.response.text}")
            raise OneSignalError(
                f"OneSignal returned {status_code}",
                code=f"http_{status_code}",
                is_permanent=status_code < 500,
            ) from e
        except httpx.TimeoutException as e:
            raise OneSignalError("OneSignal request timed out", code="timeout") from e
        except httpx.HTTPError as e:
            raise OneSignalError(
                f"OneSignal request failed: {e}", code="connection_error"
            ) from e

        result = response.json()
        invalid = result.get("invalid_player_ids") or []
        if not invalid and isinstance(result.get("errors"), dict):
            invalid = result["errors"].get("invalid_player_ids") or []
        if invalid:
            logger.warning(f"OneSignal reported invalid player IDs: {invalid}")

        logger.info(f"OneSignal notification sent to {len(player_ids)} players")
        return OneSignalResponse(
            notification_id=result.get("id") or None,
            invalid_player_ids=list(invalid),
        )
