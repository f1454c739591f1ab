"""
Tests for MetadataRecord and RecordBuilder.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from linkscout.models.enums import RecordKind
from linkscout.models.metadata import VIDEO_ONLY_FIELDS, MetadataRecord, RecordBuilder

URL = "https://example.com/a"


class TestMetadataRecord:
    """Tests for the MetadataRecord model."""

    def test_minimal_record(self) -> None:
        """Test only url and record kind are required."""
        record = MetadataRecord(url=URL, record_kind=RecordKind.ARTICLE)
        assert record.title is None
        assert record.to_public_dict() == {"url": URL, "recordKind": "article"}

    def test_record_is_frozen(self) -> None:
        """Test records cannot be mutated after construction."""
        record = MetadataRecord(url=URL, record_kind=RecordKind.ARTICLE)
        with pytest.raises(ValidationError):
            record.title = "changed"  # type: ignore[misc]

    def test_empty_url_rejected(self) -> None:
        """Test url must be non-empty."""
        with pytest.raises(ValidationError):
            MetadataRecord(url="", record_kind=RecordKind.ARTICLE)

    @pytest.mark.parametrize("value", [-1, "123", 1.5])
    def test_view_count_must_be_non_negative_int(self, value: object) -> None:
        """Test strings, floats and negatives are rejected for view_count."""
        with pytest.raises(ValidationError):
            MetadataRecord(url=URL, record_kind=RecordKind.VIDEO, view_count=value)

    def test_video_id_validated(self) -> None:
        """Test malformed video IDs are rejected."""
        with pytest.raises(ValidationError):
            MetadataRecord(url=URL, record_kind=RecordKind.VIDEO, video_id="bad")

    @pytest.mark.parametrize("field", sorted(VIDEO_ONLY_FIELDS))
    def test_article_rejects_video_fields(self, field: str) -> None:
        """Test video-only fields cannot appear on article records."""
        values = {
            "view_count": 10,
            "channel_name": "Channel",
            "channel_url": "https://www.youtube.com/@c",
            "video_id": "dQw4w9WgXcQ",
        }
        with pytest.raises(ValidationError, match="Article records cannot carry"):
            MetadataRecord(url=URL, record_kind=RecordKind.ARTICLE, **{field: values[field]})

    def test_public_dict_uses_camel_case(self) -> None:
        """Test serialization keys and omission of absent fields."""
        record = MetadataRecord(
            url=URL,
            record_kind=RecordKind.VIDEO,
            title="T",
            view_count=5,
            channel_name="C",
            content_type_hint="video.other",
        )
        assert record.to_public_dict() == {
            "url": URL,
            "recordKind": "video",
            "title": "T",
            "viewCount": 5,
            "channelName": "C",
            "contentTypeHint": "video.other",
        }

    def test_populate_by_alias(self) -> None:
        """Test records can be rebuilt from their public form."""
        record = MetadataRecord.model_validate(
            {"url": URL, "recordKind": "article", "siteName": "Site"}
        )
        assert record.site_name == "Site"


class TestRecordBuilder:
    """Tests for RecordBuilder."""

    def test_first_writer_wins(self) -> None:
        """Test a populated field is never overwritten."""
        builder = RecordBuilder(URL, RecordKind.VIDEO)

        assert builder.set_if_missing("view_count", 12345, "viewCount-key") is True
        assert builder.set_if_missing("view_count", 1, "ytInitialData") is False

        assert builder.get("view_count") == 12345
        assert builder.source_of("view_count") == "viewCount-key"
        assert builder.build().view_count == 12345

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values_ignored(self, value: object) -> None:
        """Test None and blank strings leave the field open."""
        builder = RecordBuilder(URL, RecordKind.ARTICLE)
        assert builder.set_if_missing("title", value) is False
        assert builder.has("title") is False
        assert builder.set_if_missing("title", "Later") is True

    @pytest.mark.parametrize("field", ["nonexistent", "url", "record_kind"])
    def test_unknown_field_rejected(self, field: str) -> None:
        """Test only optional record fields can be set."""
        builder = RecordBuilder(URL, RecordKind.ARTICLE)
        with pytest.raises(ValueError, match="Unknown metadata field"):
            builder.set_if_missing(field, "x")

    def test_sources_is_a_copy(self) -> None:
        """Test the sources mapping cannot be mutated through the property."""
        builder = RecordBuilder(URL, RecordKind.ARTICLE)
        builder.set_if_missing("title", "T", "og:title")
        builder.sources["title"] = "tampered"
        assert builder.sources == {"title": "og:title"}
