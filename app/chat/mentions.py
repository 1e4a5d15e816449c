"""
@mention parsing and resolution.

Two strategies are provided:

- parse_mentions: syntactic scan. Finds "@name" and '@"name with spaces"'
  tokens without knowing who exists.
- find_mentioned_users: resolves mentions against a user list. Usernames may
  contain spaces, so at every "@" the longest username that prefixes the
  following text (case-insensitively) wins.

highlight_mentions turns content into text/mention segments for clients.

Usage:
    from chat.mentions import find_mentioned_users

    users = find_mentioned_users("hi @Jane Doe!", User.objects.all())
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

MENTION_PATTERN = re.compile(r'@(?:"([^"]+)"|([a-zA-Z0-9_\s]+?)(?=\s|$|[^\w\s]))')


class Mentionable(Protocol):
    id: Any
    username: str


@dataclass(frozen=True)
class ParsedMention:
    """A syntactic mention: trimmed username and its span (including the @)."""

    username: str
    start: int
    end: int


@dataclass(frozen=True)
class ResolvedMention:
    """A mention matched to a known user."""

    user: Any
    start: int
    end: int


def parse_mentions(text: str) -> list[ParsedMention]:
    mentions = []
    for match in MENTION_PATTERN.finditer(text or ""):
        username = (match.group(1) or match.group(2) or "").strip()
        if username:
            mentions.append(ParsedMention(username, match.start(), match.end()))
    return mentions


def _is_boundary(char: str) -> bool:
    """True if char may follow a username: end of text, whitespace or punctuation."""
    if not char:
        return True
    return char.isspace() or not (char.isalnum() or char == "_")


def resolve_mentions(text: str, users: Iterable[Mentionable]) -> list[ResolvedMention]:
    """
    Resolve every "@" in text against users.

    Users are tried longest username first; the first one that prefixes the
    text after the "@" and ends on a word boundary is the match. A quoted
    form @"name" must match a username exactly.
    """
    if not text or "@" not in text:
        return []

    candidates = sorted(
        (user for user in users if user.username),
        key=lambda user: len(user.username),
        reverse=True,
    )
    lowered = text.lower()
    resolved = []

    for at in (index for index, char in enumerate(text) if char == "@"):
        rest = lowered[at + 1 :]
        quoted = rest.startswith('"')
        if quoted:
            rest = rest[1:]

        for user in candidates:
            name = user.username.lower()
            if not rest.startswith(name):
                continue
            following = rest[len(name) : len(name) + 1]
            if quoted:
                if following != '"':
                    continue
                end = at + 1 + len(name) + 2
            else:
                if not _is_boundary(following):
                    continue
                end = at + 1 + len(name)
            resolved.append(ResolvedMention(user, at, end))
            break

    return resolved


def find_mentioned_users(text: str, users: Iterable[Mentionable]) -> list[Any]:
    """Users mentioned in text, deduplicated, in order of first appearance."""
    found = []
    seen = set()
    for mention in resolve_mentions(text, users):
        if mention.user.id not in seen:
            seen.add(mention.user.id)
            found.append(mention.user)
    return found


def highlight_mentions(
    text: str,
    users: Sequence[Mentionable] | None = None,
) -> list[dict[str, Any]]:
    """
    Split text into segments for rendering.

    Returns:
        [{"type": "text", "text": ...}, {"type": "mention", "text": "@alice", "user_id": 3}, ...]
        Without users (None or empty), mention segments come from
        parse_mentions and carry no user_id.
    """
    text = text or ""
    if not users:
        spans = [(m.start, m.end, None) for m in parse_mentions(text)]
    else:
        spans = [(m.start, m.end, m.user.id) for m in resolve_mentions(text, users)]

    segments: list[dict[str, Any]] = []
    cursor = 0
    for start, end, user_id in spans:
        if start < cursor:
            continue
        if start > cursor:
            segments.append({"type": "text", "text": text[cursor:start]})
        segment: dict[str, Any] = {"type": "mention", "text": text[start:end]}
        if user_id is not None:
            segment["user_id"] = user_id
        segments.append(segment)
        cursor = end

    if cursor < len(text):
        segments.append({"type": "text", "text": text[cursor:]})

    return segments
