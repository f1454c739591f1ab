"""
Unit tests for YouTubeStrategy.

Tests cover:
- oEmbed lookup seeding and failure isolation
- View count resolution order (key scan, ytInitialData, JSON-LD,
  microdata, display text)
- First-writer-wins between the lookup and page sources
- Page fetch failure handling

All network access goes through FakeFetcher. No live HTTP calls are made.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from linkscout.config.settings import Settings
from linkscout.exceptions import FetchError
from linkscout.models.enums import Platform, RecordKind
from linkscout.services.extraction.classifier import UrlClassification
from linkscout.services.extraction.youtube import (
    OEMBED_ENDPOINT,
    YouTubeStrategy,
    read_channel_link,
    read_initial_data_view_count,
    read_owner_channel_name,
    scan_view_count_keys,
    scan_view_count_text,
)
from linkscout.services.interfaces.fetcher_interface import FetchResult
from tests.fakes import FakeFetcher

VIDEO_ID = "dQw4w9WgXcQ"
URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"
CLASSIFICATION = UrlClassification(platform=Platform.YOUTUBE, video_id=VIDEO_ID)
MODULE = "linkscout.services.extraction.youtube"

OEMBED_RESPONSE = {
    "title": "Never Gonna Give You Up",
    "author_name": "Rick Astley",
    "author_url": "https://www.youtube.com/@RickAstleyYT",
    "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
    "provider_name": "YouTube",
    "type": "video",
}


# ============================================================================
# HTML Test Fixtures
# ============================================================================

WATCH_PAGE = """
<html><head>
<title>Page Title - YouTube</title>
<meta property="og:title" content="OG Title">
<meta property="og:description" content="OG description">
<meta property="og:image" content="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg">
<meta property="og:site_name" content="YouTube">
<meta property="og:type" content="video.other">
<link rel="canonical" href="https://www.youtube.com/watch?v=dQw4w9WgXcQ">
<meta itemprop="uploadDate" content="2009-10-24T23:57:33-07:00">
<meta itemprop="datePublished" content="2009-10-25">
<link itemprop="url" href="https://www.youtube.com/watch?v=dQw4w9WgXcQ">
<span itemprop="author" itemscope itemtype="http://schema.org/Person">
<link itemprop="url" href="http://www.youtube.com/@RickAstleyYT">
<link itemprop="name" content="Page Channel">
</span>
</head><body>
<script>var ytInitialPlayerResponse = {"videoDetails":{"videoId":"dQw4w9WgXcQ","viewCount":"1234567890","ownerChannelName":"Owner Channel"}};</script>
</body></html>
"""

REPEATED_KEY_PAGE = (
    '<script>{"videoDetails":{"viewCount":"0"}}'
    '{"a":{"viewCount":"12345"}}{"b":{"viewCount":"0"}}'
    '{"c":{"viewCount":"12345"}}</script>'
)


def _initial_data_page(renderer: dict[str, Any]) -> str:
    data = {
        "contents": {
            "twoColumnWatchNextResults": {
                "results": {
                    "results": {
                        "contents": [
                            {"videoPrimaryInfoRenderer": {
                                "title": {"runs": [{"text": "x"}]},
                                "viewCount": {"videoViewCountRenderer": renderer},
                            }},
                            {"videoSecondaryInfoRenderer": {}},
                        ]
                    }
                }
            }
        }
    }
    return f"<script>var ytInitialData = {json.dumps(data)};</script>"


def _loader(markup: str):
    async def load_page() -> str:
        return markup

    return load_page


def _failing_loader():
    async def load_page() -> str:
        raise FetchError(URL, reason="http_status", status_code=503)

    return load_page


@pytest.fixture
def oembed_fetcher() -> FakeFetcher:
    """Fetcher answering the oEmbed endpoint with a valid response."""
    return FakeFetcher({OEMBED_ENDPOINT: json.dumps(OEMBED_RESPONSE)})


# ============================================================================
# Page-level readers
# ============================================================================


class TestViewCountReaders:
    """Tests for the module-level view count readers."""

    def test_first_positive_key_wins(self) -> None:
        """Test zero-valued keys are skipped and the first positive one kept."""
        assert scan_view_count_keys(REPEATED_KEY_PAGE) == 12345

    def test_twice_then_zero(self) -> None:
        """Test two 12345 occurrences followed by zero."""
        markup = '"viewCount":"12345" "viewCount":"12345" "viewCount":"0"'
        assert scan_view_count_keys(markup) == 12345

    def test_unquoted_key(self) -> None:
        """Test numeric JSON values without quotes."""
        assert scan_view_count_keys('{"viewCount": 77}') == 77

    def test_oversized_key_skipped(self) -> None:
        """Test a digit run beyond any real count is skipped, not fatal."""
        markup = '"viewCount":"' + "9" * 5000 + '" "viewCount":"777"'
        assert scan_view_count_keys(markup) == 777

    def test_no_positive_key(self) -> None:
        """Test all-zero or absent keys return None."""
        assert scan_view_count_keys('"viewCount":"0"') is None
        assert scan_view_count_keys("<html></html>") is None

    def test_initial_data_view_count_text(self) -> None:
        """Test display text under videoViewCountRenderer.viewCount."""
        markup = _initial_data_page({"viewCount": {"simpleText": "1,234,567 views"}})
        assert read_initial_data_view_count(markup, 2_000_000) == 1_234_567

    def test_initial_data_original_view_count(self) -> None:
        """Test the alternate originalViewCount path."""
        markup = _initial_data_page({"originalViewCount": "98765"})
        assert read_initial_data_view_count(markup, 2_000_000) == 98_765

    def test_initial_data_short_view_count_runs(self) -> None:
        """Test abbreviated counts carried in runs."""
        markup = _initial_data_page(
            {"shortViewCount": {"runs": [{"text": "2.5M"}, {"text": " views"}]}}
        )
        assert read_initial_data_view_count(markup, 2_000_000) == 2_500_000

    def test_initial_data_malformed(self) -> None:
        """Test a malformed block returns None instead of raising."""
        markup = '<script>var ytInitialData = {"contents": [}, "x": 1};</script>'
        assert read_initial_data_view_count(markup, 2_000_000) is None

    def test_initial_data_outside_window(self) -> None:
        """Test an object larger than the scan window is not read."""
        markup = _initial_data_page({"originalViewCount": "98765"})
        assert read_initial_data_view_count(markup, 40) is None

    @pytest.mark.parametrize(
        ("markup", "expected"),
        [
            ('"viewCountText":{"simpleText":"3.4M views"}', 3_400_000),
            ('"shortViewCount":{"simpleText":"500K views"}', 500_000),
            ('"interactionCount":"1,024"', 1_024),
            ('"interactionCount": 1e999', None),
            ('"viewCountText":{"simpleText":"No views"}', None),
        ],
    )
    def test_view_count_text(self, markup: str, expected: int | None) -> None:
        """Test text patterns are normalized through count parsing."""
        assert scan_view_count_text(markup) == expected

    def test_owner_channel_name(self) -> None:
        """Test JSON-escaped channel names are decoded."""
        markup = r'"ownerChannelName":"Café \"Live\""'
        assert read_owner_channel_name(markup) == 'Café "Live"'

    def test_channel_link_skips_video_link(self) -> None:
        """Test only channel-shaped itemprop url links are accepted."""
        assert read_channel_link(WATCH_PAGE) == "http://www.youtube.com/@RickAstleyYT"


# ============================================================================
# Strategy
# ============================================================================


@pytest.mark.asyncio
class TestYouTubeStrategy:
    """Tests for YouTubeStrategy.extract."""

    async def test_oembed_then_page(
        self, oembed_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test lookup fields win and the page fills the rest."""
        strategy = YouTubeStrategy(oembed_fetcher, mock_settings)

        record = await strategy.extract(URL, CLASSIFICATION, _loader(WATCH_PAGE))

        assert record.record_kind is RecordKind.VIDEO
        assert record.video_id == VIDEO_ID
        assert record.title == "Never Gonna Give You Up"
        assert record.channel_name == "Rick Astley"
        assert record.channel_url == "https://www.youtube.com/@RickAstleyYT"
        assert record.image_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        assert record.site_name == "YouTube"
        assert record.view_count == 1_234_567_890
        assert record.description == "OG description"
        assert record.publish_date == "2009-10-24T23:57:33-07:00"
        assert record.content_type_hint == "video.other"
        assert record.canonical_url == URL

    async def test_oembed_request(
        self, oembed_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test the lookup is keyed by the URL and uses the short timeout."""
        strategy = YouTubeStrategy(oembed_fetcher, mock_settings)

        await strategy.extract(URL, CLASSIFICATION, _loader(WATCH_PAGE))

        assert len(oembed_fetcher.calls) == 1
        call = oembed_fetcher.calls[0]
        query = parse_qs(urlparse(str(call["url"])).query)
        assert query == {"url": [URL], "format": ["json"]}
        assert call["timeout"] == mock_settings.lookup_timeout

    @pytest.mark.parametrize(
        "oembed_response",
        [
            FetchError(OEMBED_ENDPOINT, reason="timeout"),
            FetchResult(url=OEMBED_ENDPOINT, status_code=401, text="Unauthorized"),
            "<html>not json</html>",
            "[1, 2, 3]",
        ],
        ids=["timeout", "http-401", "not-json", "not-object"],
    )
    async def test_oembed_failure_does_not_abort(
        self,
        oembed_response: object,
        mock_settings: Settings,
    ) -> None:
        """Test page sources are used when the lookup yields nothing."""
        fetcher = FakeFetcher({OEMBED_ENDPOINT: oembed_response})
        strategy = YouTubeStrategy(fetcher, mock_settings)

        record = await strategy.extract(URL, CLASSIFICATION, _loader(WATCH_PAGE))

        assert record.title == "OG Title"
        assert record.channel_name == "Page Channel"
        assert record.channel_url == "http://www.youtube.com/@RickAstleyYT"
        assert record.image_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert record.view_count == 1_234_567_890

    async def test_key_scan_prevents_later_fallbacks(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test the embedded-JSON and text fallbacks never run once set."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = REPEATED_KEY_PAGE + _initial_data_page({"originalViewCount": "1"})

        with patch(f"{MODULE}.read_initial_data_view_count") as mock_initial:
            with patch(f"{MODULE}.scan_view_count_text") as mock_text:
                record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 12345
        mock_initial.assert_not_called()
        mock_text.assert_not_called()

    async def test_initial_data_fallback(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test ytInitialData is used when no numeric key is present."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = _initial_data_page({"viewCount": {"simpleText": "4,321 views"}})

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 4_321

    async def test_json_ld_fallback(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test a VideoObject supplies count, title and upload date."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        block = {
            "@context": "https://schema.org",
            "@type": "VideoObject",
            "name": "LD Title",
            "uploadDate": "2020-02-02",
            "interactionStatistic": {
                "@type": "InteractionCounter",
                "interactionType": {"@type": "WatchAction"},
                "userInteractionCount": 555,
            },
        }
        markup = f'<script type="application/ld+json">{json.dumps(block)}</script>'

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 555
        assert record.title == "LD Title"
        assert record.publish_date == "2020-02-02"

    async def test_infinite_json_ld_count_keeps_other_fields(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test an unrepresentable count does not discard title and date."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = (
            '<script type="application/ld+json">'
            '{"@type": "VideoObject", "name": "LD Title", "uploadDate": "2020-02-02",'
            ' "interactionCount": 1e999}</script>'
        )

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.title == "LD Title"
        assert record.publish_date == "2020-02-02"
        assert record.view_count is None

    async def test_microdata_interaction_count(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test itemprop interactionCount is used after structured data."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = '<meta itemprop="interactionCount" content="5000000">'

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 5_000_000

    async def test_malformed_initial_data_allows_text_fallback(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test a broken client-state block does not stop pattern fallbacks."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = (
            '<script>var ytInitialData = {"contents": [}, "x": 1};</script>'
            '<script>var other = {"viewCountText":{"simpleText":"3.4M views"}};</script>'
            "<title>Cats - YouTube</title>"
        )

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 3_400_000
        assert record.title == "Cats"

    async def test_failing_initial_data_reader_is_isolated(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test an exception inside one reader does not abort extraction."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = '"shortViewCount":{"simpleText":"12K views"}'

        with patch(
            f"{MODULE}.read_initial_data_view_count",
            MagicMock(side_effect=RuntimeError("boom")),
        ):
            record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.view_count == 12_000

    async def test_owner_channel_name_fallback(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test ownerChannelName is used without microdata."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)
        markup = '<script>{"ownerChannelName":"Owner Channel"}</script>'

        record = await strategy.extract(URL, CLASSIFICATION, _loader(markup))

        assert record.channel_name == "Owner Channel"

    async def test_page_failure_with_lookup_returns_partial_record(
        self, oembed_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test lookup fields are returned when the page cannot be fetched."""
        strategy = YouTubeStrategy(oembed_fetcher, mock_settings)

        record = await strategy.extract(URL, CLASSIFICATION, _failing_loader())

        assert record.title == "Never Gonna Give You Up"
        assert record.channel_name == "Rick Astley"
        assert record.view_count is None

    async def test_page_failure_without_lookup_raises(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test FetchError propagates when no source produced anything."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)

        with pytest.raises(FetchError) as exc_info:
            await strategy.extract(URL, CLASSIFICATION, _failing_loader())

        assert exc_info.value.status_code == 503

    async def test_empty_page_yields_identity_fields(
        self, fake_fetcher: FakeFetcher, mock_settings: Settings
    ) -> None:
        """Test a minimal page yields only url, kind and video ID."""
        strategy = YouTubeStrategy(fake_fetcher, mock_settings)

        record = await strategy.extract(URL, CLASSIFICATION, _loader("<html></html>"))

        assert record.to_public_dict() == {
            "url": URL,
            "recordKind": "video",
            "videoId": VIDEO_ID,
        }
