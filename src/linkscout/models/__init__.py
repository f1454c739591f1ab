"""
Data models for linkscout.

Pydantic models describing the normalized metadata record produced by the
extraction engine.
"""

from __future__ import annotations

from linkscout.models.enums import Platform, RecordKind
from linkscout.models.metadata import MetadataRecord, RecordBuilder

__all__ = ["MetadataRecord", "Platform", "RecordBuilder", "RecordKind"]
