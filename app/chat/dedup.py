"""
Duplicate message detection.

Clients send optimistically and also receive their own message back as a
realtime event; a double click can submit the same message twice. Both cases
are reconciled with the same predicate:

    - same id, or
    - same sender, same content (text) or same file_url (file), within the window

Usage:
    from chat.dedup import MessageSnapshot, is_duplicate

    if is_duplicate(MessageSnapshot.from_message(a), MessageSnapshot.from_message(b)):
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from chat.constants import MESSAGE_CONFIG


@dataclass(frozen=True)
class MessageSnapshot:
    """The fields duplicate detection looks at, for rooms and direct messages alike."""

    id: Any
    sender_id: Any
    content: str
    file_url: str
    timestamp: datetime

    @property
    def is_file(self) -> bool:
        return bool(self.file_url)

    @classmethod
    def from_message(cls, message) -> MessageSnapshot:
        return cls(
            id=message.pk,
            sender_id=message.sender_id,
            content=message.content or "",
            file_url=message.file_url or "",
            timestamp=message.created_at,
        )


def is_duplicate(
    incoming: MessageSnapshot,
    candidate: MessageSnapshot,
    window_ms: int = MESSAGE_CONFIG.DUPLICATE_WINDOW_MS,
) -> bool:
    if incoming.id is not None and incoming.id == candidate.id:
        return True

    if incoming.sender_id != candidate.sender_id:
        return False

    elapsed_ms = abs((incoming.timestamp - candidate.timestamp).total_seconds()) * 1000
    if elapsed_ms >= window_ms:
        return False

    if incoming.is_file or candidate.is_file:
        return incoming.is_file and candidate.is_file and incoming.file_url == candidate.file_url

    return incoming.content == candidate.content


def merge_unique(
    existing: Iterable[MessageSnapshot],
    incoming: Iterable[MessageSnapshot],
    window_ms: int = MESSAGE_CONFIG.DUPLICATE_WINDOW_MS,
) -> list[MessageSnapshot]:
    """Append each incoming message unless it duplicates one already present."""
    merged = list(existing)
    for message in incoming:
        if not any(is_duplicate(message, other, window_ms) for other in merged):
            merged.append(message)
    return merged
