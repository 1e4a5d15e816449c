"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message operations (content limits, duplicate suppression)
- Rooms (default room)
- Unread badges
- Realtime (websocket close and error codes)

Import example:
    from chat.constants import MESSAGE_CONFIG, ROOM_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters

    # Same sender, same target, same content within this window is one message
    DUPLICATE_WINDOW_MS: Final[int] = 1000

    # Characters of content used as a notification body
    PREVIEW_LENGTH: Final[int] = 100


# =============================================================================
# Room Configuration
# =============================================================================


class ROOM_CONFIG:
    """Configuration for rooms."""

    DEFAULT_ROOM_NAME: Final[str] = "general"
    MAX_NAME_LENGTH: Final[int] = 100


# =============================================================================
# Unread Configuration
# =============================================================================


class UNREAD_CONFIG:
    """Configuration for unread badges."""

    # Counts above this are displayed as "9+"
    BADGE_CAP: Final[int] = 9


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_CONFIG:
    """Websocket close and error codes."""

    CLOSE_UNAUTHENTICATED: Final[int] = 4001
    ERROR_FORBIDDEN: Final[int] = 4003
    ERROR_BAD_REQUEST: Final[int] = 4000

    # Subprotocol that carries the JWT as its second entry
    JWT_SUBPROTOCOL: Final[str] = "jwt"
