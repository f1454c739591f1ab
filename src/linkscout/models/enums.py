"""
Enums for linkscout models.
"""

from __future__ import annotations

from enum import Enum


class RecordKind(str, Enum):
    """Which extraction strategy produced a metadata record."""

    VIDEO = "video"
    ARTICLE = "article"


class Platform(str, Enum):
    """URL classification result."""

    YOUTUBE = "youtube"
    GENERIC = "generic"
