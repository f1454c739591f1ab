"""
Metadata record models.

Defines ``MetadataRecord``, the single output entity of the extraction
engine, and ``RecordBuilder``, the per-call accumulator that enforces the
first-writer-wins rule while strategies populate fields from sources of
decreasing priority.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from linkscout.models.enums import RecordKind
from linkscout.models.youtube_types import VideoId

VIDEO_ONLY_FIELDS: frozenset[str] = frozenset(
    {"view_count", "channel_name", "channel_url", "video_id"}
)
"""Fields that are only meaningful on ``RecordKind.VIDEO`` records."""


class MetadataRecord(BaseModel):
    """
    Normalized metadata extracted from a single URL.

    Every field besides ``url`` and ``record_kind`` is optional; absence means
    no source yielded a value. Records are immutable once built.

    Attributes
    ----------
    url : str
        The original input URL, unmodified.
    record_kind : RecordKind
        ``video`` for platform records, ``article`` for generic pages.
    title : str | None
        Page or video title.
    description : str | None
        Summary text.
    author : str | None
        Article author (article records).
    site_name : str | None
        Publishing site name.
    image_url : str | None
        Preview image or video thumbnail URL.
    canonical_url : str | None
        Canonical link declared by the page.
    content_type_hint : str | None
        Social-preview type (e.g. ``"article"``, ``"video.other"``).
    publish_date : str | None
        Publication or upload date, verbatim as found.
    view_count : int | None
        Non-negative view count (video records).
    channel_name : str | None
        Uploading channel name (video records).
    channel_url : str | None
        Uploading channel URL (video records).
    video_id : str | None
        Platform video identifier (video records).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    url: str = Field(min_length=1)
    record_kind: RecordKind
    title: str | None = None
    description: str | None = None
    author: str | None = None
    site_name: str | None = None
    image_url: str | None = None
    canonical_url: str | None = None
    content_type_hint: str | None = None
    publish_date: str | None = None
    view_count: int | None = Field(default=None, ge=0, strict=True)
    channel_name: str | None = None
    channel_url: str | None = None
    video_id: VideoId | None = None

    @model_validator(mode="after")
    def check_video_fields(self) -> MetadataRecord:
        """Reject video-only fields on article records."""
        if self.record_kind is RecordKind.ARTICLE:
            present = sorted(
                name for name in VIDEO_ONLY_FIELDS if getattr(self, name) is not None
            )
            if present:
                raise ValueError(
                    f"Article records cannot carry video fields: {', '.join(present)}"
                )
        return self

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RecordBuilder:
    """
    Mutable accumulator for a ``MetadataRecord`` under construction.

    Strategies call ``set_if_missing`` with values from sources in priority
    order; a field, once set, is never overwritten. The builder is local to a
    single extraction call.

    Parameters
    ----------
    url : str
        The original input URL.
    record_kind : RecordKind
        Kind of record being built.

    Examples
    --------
    >>> builder = RecordBuilder("https://example.com", RecordKind.ARTICLE)
    >>> builder.set_if_missing("title", "First")
    True
    >>> builder.set_if_missing("title", "Second")
    False
    >>> builder.build().title
    'First'
    """

    def __init__(self, url: str, record_kind: RecordKind) -> None:
        self.url = url
        self.record_kind = record_kind
        self._fields: dict[str, Any] = {}
        self._sources: dict[str, str] = {}

    def has(self, field: str) -> bool:
        """Return True when *field* already holds a value."""
        return field in self._fields

    def get(self, field: str) -> Any:
        """Return the current value of *field*, or None."""
        return self._fields.get(field)

    def source_of(self, field: str) -> str | None:
        """Return the name of the source that populated *field*."""
        return self._sources.get(field)

    def set_if_missing(self, field: str, value: Any, source: str = "") -> bool:
        """
        Set *field* unless it is already populated or *value* is empty.

        Parameters
        ----------
        field : str
            A ``MetadataRecord`` field name.
        value : Any
            Candidate value; ``None`` and empty strings are ignored.
        source : str, optional
            Name of the source that produced the value (for diagnostics).

        Returns
        -------
        bool
            True if the value was stored.

        Raises
        ------
        ValueError
            If *field* is not a settable ``MetadataRecord`` field.
        """
        if field not in MetadataRecord.model_fields or field in ("url", "record_kind"):
            raise ValueError(f"Unknown metadata field: {field}")
        if field in self._fields:
            return False
        if value is None or (isinstance(value, str) and not value.strip()):
            return False
        self._fields[field] = value
        self._sources[field] = source
        return True

    @property
    def sources(self) -> dict[str, str]:
        """Copy of the field-to-source mapping."""
        return dict(self._sources)

    def build(self) -> MetadataRecord:
        """Produce the immutable record."""
        return MetadataRecord(
            url=self.url, record_kind=self.record_kind, **self._fields
        )
