"""
YouTube link previews for message content.

Usage:
    from chat.links import find_youtube_links

    previews = find_youtube_links("watch https://youtu.be/dQw4w9WgXcQ")
    previews[0].thumbnail_url  # https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

YOUTUBE_ID_PATTERN = re.compile(
    r"(?:youtube\.com\/watch\?v=|youtu\.be\/|youtube\.com\/embed\/|youtube\.com\/v\/"
    r"|m\.youtube\.com\/watch\?v=|youtube\.com\/watch\?\S*&v=)([^&\s?#]+)",
    re.IGNORECASE,
)
# Scheme and www are optional: people often paste "youtu.be/ID"
YOUTUBE_LINK_PATTERN = re.compile(
    r"(?:https?:\/\/)?(?:www\.)?" + YOUTUBE_ID_PATTERN.pattern, re.IGNORECASE
)

THUMBNAIL_QUALITIES = ("", "mq", "hq", "sd", "maxres")


@dataclass(frozen=True)
class YouTubePreview:
    video_id: str
    url: str
    thumbnail_url: str
    embed_url: str
    watch_url: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def extract_video_id(url: str) -> str | None:
    match = YOUTUBE_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


def thumbnail_url(video_id: str, quality: str = "hq") -> str:
    if quality not in THUMBNAIL_QUALITIES:
        raise ValueError(f"Unknown thumbnail quality: {quality}")
    return f"https://img.youtube.com/vi/{video_id}/{quality}default.jpg"


def embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def find_youtube_links(text: str) -> list[YouTubePreview]:
    """Previews for every YouTube URL in text, one per video id."""
    previews = []
    seen = set()
    for match in YOUTUBE_LINK_PATTERN.finditer(text or ""):
        url = match.group(0)
        video_id = match.group(1)
        if video_id in seen:
            continue
        seen.add(video_id)
        previews.append(
            YouTubePreview(
                video_id=video_id,
                url=url,
                thumbnail_url=thumbnail_url(video_id),
                embed_url=embed_url(video_id),
                watch_url=watch_url(video_id),
            )
        )
    return previews
