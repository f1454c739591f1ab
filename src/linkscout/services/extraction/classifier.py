"""
URL classification for strategy dispatch.

Recognizes YouTube watch, shorts, embed, live and short-link URLs and
extracts the video identifier; anything else is generic.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

from linkscout.models.enums import Platform
from linkscout.models.youtube_types import is_valid_video_id

_YOUTUBE_HOSTS = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "music.youtube.com",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    }
)
_SHORT_LINK_HOSTS = frozenset({"youtu.be", "www.youtu.be"})

# Path prefixes whose next segment is the video ID.
_ID_PATH_MARKERS = ("shorts", "embed", "live", "v", "e")


@dataclass(frozen=True)
class UrlClassification:
    """Result of classifying a URL."""

    platform: Platform
    video_id: str | None = None


_GENERIC = UrlClassification(platform=Platform.GENERIC)


def _host(netloc: str) -> str:
    host = netloc.rsplit("@", 1)[-1].split(":", 1)[0]
    return host.lower().rstrip(".")


def extract_youtube_id(url: str) -> str | None:
    """
    Return the YouTube video ID carried by *url*, or ``None``.

    Examples
    --------
    >>> extract_youtube_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    'dQw4w9WgXcQ'
    >>> extract_youtube_id("https://youtu.be/dQw4w9WgXcQ?t=42")
    'dQw4w9WgXcQ'
    """
    candidate = url.strip()
    if "://" not in candidate:
        candidate = "https://" + candidate

    try:
        parsed = urlparse(candidate)
    except ValueError:
        return None

    host = _host(parsed.netloc)
    segments = [s for s in parsed.path.split("/") if s]

    video_id: str | None = None
    if host in _SHORT_LINK_HOSTS:
        video_id = segments[0] if segments else None
    elif host in _YOUTUBE_HOSTS:
        if segments[:1] == ["watch"]:
            values = parse_qs(parsed.query).get("v")
            video_id = values[0] if values else None
        elif len(segments) >= 2 and segments[0] in _ID_PATH_MARKERS:
            video_id = segments[1]

    if video_id and is_valid_video_id(video_id):
        return video_id
    return None


def classify_url(url: str) -> UrlClassification:
    """Classify *url* as a recognized platform link or a generic page."""
    video_id = extract_youtube_id(url)
    if video_id is None:
        return _GENERIC
    return UrlClassification(platform=Platform.YOUTUBE, video_id=video_id)
