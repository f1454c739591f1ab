"""
Unit tests for URL classification.
"""

from __future__ import annotations

import pytest

from linkscout.models.enums import Platform
from linkscout.services.extraction.classifier import (
    UrlClassification,
    classify_url,
    extract_youtube_id,
)

VIDEO_ID = "dQw4w9WgXcQ"


class TestExtractYoutubeId:
    """Tests for extract_youtube_id."""

    @pytest.mark.parametrize(
        "url",
        [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtube.com/watch?feature=share&v={VIDEO_ID}&t=10s",
            f"http://m.youtube.com/watch?v={VIDEO_ID}",
            f"https://music.youtube.com/watch?v={VIDEO_ID}&list=RD",
            f"https://youtu.be/{VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}?t=42",
            f"https://www.youtube.com/shorts/{VIDEO_ID}",
            f"https://www.youtube.com/embed/{VIDEO_ID}?autoplay=1",
            f"https://www.youtube-nocookie.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/live/{VIDEO_ID}",
            f"https://WWW.YOUTUBE.COM/watch?v={VIDEO_ID}",
            f"www.youtube.com/watch?v={VIDEO_ID}",
            f"youtu.be/{VIDEO_ID}",
        ],
    )
    def test_recognized_forms(self, url: str) -> None:
        """Test every supported link shape yields the video ID."""
        assert extract_youtube_id(url) == VIDEO_ID

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/",
            "https://www.youtube.com/watch",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/@channel",
            "https://www.youtube.com/playlist?list=PL123",
            "https://notyoutube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/",
            "",
        ],
    )
    def test_unrecognized_forms(self, url: str) -> None:
        """Test other URLs yield no ID."""
        assert extract_youtube_id(url) is None


class TestClassifyUrl:
    """Tests for classify_url."""

    def test_canonical_and_short_link_classify_identically(self) -> None:
        """Test watch and short-link forms of the same video are equal."""
        canonical = classify_url(f"https://www.youtube.com/watch?v={VIDEO_ID}")
        short = classify_url(f"https://youtu.be/{VIDEO_ID}")

        assert canonical == short
        assert canonical.platform is Platform.YOUTUBE
        assert canonical.video_id == VIDEO_ID

    def test_generic_url(self) -> None:
        """Test non-platform URLs are generic without an ID."""
        result = classify_url("https://blog.example.com/post")

        assert result == UrlClassification(platform=Platform.GENERIC)
        assert result.video_id is None
