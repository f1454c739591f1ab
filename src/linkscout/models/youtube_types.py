"""
Validated types for YouTube identifiers.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import BeforeValidator

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")


def validate_video_id(v: str) -> str:
    """Validate YouTube Video ID format."""
    if not isinstance(v, str):
        raise TypeError("VideoId must be a string")

    # Check length
    if len(v) != 11:
        raise ValueError(
            f"VideoId must be exactly 11 characters long, got {len(v)}: {v}"
        )

    # Check valid characters (alphanumeric, hyphens, underscores)
    if not _VIDEO_ID_RE.match(v):
        raise ValueError(f"VideoId contains invalid characters: {v}")

    return v


def is_valid_video_id(v: str) -> bool:
    """Return True when *v* looks like an 11-character YouTube video ID."""
    return isinstance(v, str) and bool(_VIDEO_ID_RE.match(v))


VideoId = Annotated[str, BeforeValidator(validate_video_id)]
