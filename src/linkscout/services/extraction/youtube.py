"""
YouTube extraction strategy.

Produces ``video`` records in two stages:

1. The public oEmbed endpoint is queried first; it returns clean title,
   channel and thumbnail fields without any page parsing.
2. The watch page is fetched once, and fields the lookup did not supply
   (principally the view count) are resolved from the page body through
   ordered fallbacks:

   - every ``"viewCount":"N"`` key in the body, first strictly positive value
   - the ``ytInitialData`` client-state object (bounded brace scan)
   - JSON-LD ``VideoObject`` and ``itemprop="interactionCount"`` microdata
   - ``viewCountText`` / ``shortViewCount`` text anywhere in the body

Every step is fault-isolated: a failed lookup or an unparseable block only
leaves fields empty.
"""

from __future__ import annotations

import json
import logging
import re
from functools import partial
from typing import Any
from urllib.parse import urlencode

from linkscout.config.settings import Settings
from linkscout.config.settings import settings as default_settings
from linkscout.exceptions import FetchError
from linkscout.models.enums import RecordKind
from linkscout.models.metadata import MetadataRecord, RecordBuilder
from linkscout.services.extraction import attributes as attr
from linkscout.services.extraction.base import ExtractionStrategy, PageLoader
from linkscout.services.extraction.classifier import UrlClassification
from linkscout.services.extraction.json_scanner import find_json_after_marker
from linkscout.services.extraction.markup import attribute_value, iter_tags
from linkscout.services.extraction.normalizers import (
    clean_text,
    parse_abbreviated_count,
    strip_suffix,
    truncate,
)
from linkscout.services.extraction.resolver import Source, fill_fields
from linkscout.services.extraction.structured_data import (
    VideoObjectFields,
    iter_json_ld_blocks,
    read_video_object,
)
from linkscout.services.interfaces.fetcher_interface import FetcherInterface

logger = logging.getLogger(__name__)

OEMBED_ENDPOINT = "https://www.youtube.com/oembed"
PLATFORM_TITLE_SUFFIX = "YouTube"

# oEmbed responses are a few hundred bytes.
_OEMBED_MAX_BYTES = 64 * 1024

_VIEW_COUNT_KEY_RE = re.compile(r'"viewCount"\s*:\s*"?(\d+)"?')
# Digit runs longer than this are not view counts.
_MAX_COUNT_DIGITS = 19
_VIEW_COUNT_TEXT_RES = (
    re.compile(r'"viewCountText"\s*:\s*\{\s*"simpleText"\s*:\s*"([^"]+)"'),
    re.compile(r'"shortViewCount"\s*:\s*\{\s*"simpleText"\s*:\s*"([^"]+)"'),
    re.compile(
        r'"interactionCount"\s*:\s*"?([\d,.]+\s*[KMB]?)(?![A-Za-z\d])', re.IGNORECASE
    ),
)
_OWNER_CHANNEL_NAME_RE = re.compile(r'"ownerChannelName"\s*:\s*"((?:[^"\\]|\\.)*)"')
_CHANNEL_URL_RE = re.compile(r"/(?:channel/UC[\w-]{22}|@[\w.-]+|user/[\w.-]+|c/[\w.-]+)")


def _dig(node: Any, *path: str) -> Any:
    """
    Follow *path* through nested dicts, searching list members for the key.

    ``_dig(data, "a", "b")`` returns ``data["a"]["b"]``; when an intermediate
    value is a list, the first member containing the next key is followed.
    """
    current = node
    for key in path:
        if isinstance(current, list):
            current = next(
                (item[key] for item in current if isinstance(item, dict) and key in item),
                None,
            )
        elif isinstance(current, dict):
            current = current.get(key)
        else:
            return None
        if current is None:
            return None
    return current


def _text_of(value: Any) -> str | None:
    """YouTube text is either ``{"simpleText": ...}``, ``{"runs": [...]}`` or a string."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        if isinstance(value.get("simpleText"), str):
            return value["simpleText"]
        runs = value.get("runs")
        if isinstance(runs, list):
            return "".join(
                run.get("text", "") for run in runs if isinstance(run, dict)
            ) or None
    return None


def scan_view_count_keys(markup: str) -> int | None:
    """Return the first strictly positive ``"viewCount"`` value in *markup*."""
    for match in _VIEW_COUNT_KEY_RE.finditer(markup):
        digits = match.group(1)
        if len(digits) > _MAX_COUNT_DIGITS:
            continue
        count = int(digits)
        if count > 0:
            return count
    return None


def read_initial_data_view_count(markup: str, max_scan: int) -> int | None:
    """
    Read the view count from the ``ytInitialData`` client-state object.

    Two paths under ``videoPrimaryInfoRenderer.viewCount.videoViewCountRenderer``
    are tried: the display text ``viewCount`` and ``originalViewCount``; then
    the abbreviated ``shortViewCount``.
    """
    json_str = find_json_after_marker(markup, "ytInitialData", max_scan)
    if json_str is None:
        return None
    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, ValueError):
        logger.debug("Malformed ytInitialData block")
        return None

    renderer = _dig(
        data,
        "contents",
        "twoColumnWatchNextResults",
        "results",
        "results",
        "contents",
        "videoPrimaryInfoRenderer",
        "viewCount",
        "videoViewCountRenderer",
    )
    if not isinstance(renderer, dict):
        return None

    for key in ("viewCount", "originalViewCount", "shortViewCount"):
        count = parse_abbreviated_count(_text_of(renderer.get(key)))
        if count is not None:
            return count
    return None


def scan_view_count_text(markup: str) -> int | None:
    """Parse ``viewCountText``/``shortViewCount``/``interactionCount`` text."""
    for pattern in _VIEW_COUNT_TEXT_RES:
        for match in pattern.finditer(markup):
            count = parse_abbreviated_count(match.group(1))
            if count is not None:
                return count
    return None


def read_owner_channel_name(markup: str) -> str | None:
    """Return ``videoDetails``' ``ownerChannelName`` JSON string, decoded."""
    match = _OWNER_CHANNEL_NAME_RE.search(markup)
    if not match:
        return None
    try:
        return clean_text(json.loads(f'"{match.group(1)}"'))
    except (json.JSONDecodeError, ValueError):
        return None


def read_channel_link(markup: str) -> str | None:
    """Return the first ``<link itemprop="url">`` that points at a channel."""
    for attrs in iter_tags(markup, "link"):
        if attrs.get("itemprop", "").strip().lower() != "url":
            continue
        href = attribute_value(attrs, "href").strip()
        if href and _CHANNEL_URL_RE.search(href):
            return href
    return None


class YouTubeStrategy(ExtractionStrategy):
    """
    Extraction pipeline for YouTube video URLs.

    Parameters
    ----------
    fetcher : FetcherInterface
        Used for the oEmbed lookup.
    settings : Settings | None
        Timeouts, size caps and text limits.

    Examples
    --------
    >>> strategy = YouTubeStrategy(fetcher=HttpFetcher())
    >>> record = await strategy.extract(url, classification, load_page)
    >>> record.view_count
    1234567
    """

    def __init__(self, fetcher: FetcherInterface, settings: Settings | None = None) -> None:
        self._fetcher = fetcher
        self._settings = settings or default_settings

    async def extract(
        self,
        url: str,
        classification: UrlClassification,
        load_page: PageLoader,
    ) -> MetadataRecord:
        """
        Build a ``video`` record for *url*.

        Raises
        ------
        FetchError
            Only when neither the oEmbed lookup nor the page fetch produced
            anything.
        """
        builder = RecordBuilder(url, RecordKind.VIDEO)
        builder.set_if_missing("video_id", classification.video_id, "url")

        looked_up = await self._apply_oembed(url, builder)

        try:
            markup = await load_page()
        except FetchError:
            if not looked_up:
                raise
            logger.warning(
                "Page fetch failed for %s; returning oEmbed fields only", url
            )
            return builder.build()

        self._apply_page(markup, builder)
        logger.debug("YouTube extraction for %s used sources %s", url, builder.sources)
        return builder.build()

    async def lookup_oembed(self, url: str) -> dict[str, Any] | None:
        """
        Query the oEmbed endpoint for *url*.

        Returns
        -------
        dict[str, Any] | None
            The decoded JSON object, or ``None`` on any failure.
        """
        lookup_url = f"{OEMBED_ENDPOINT}?{urlencode({'url': url, 'format': 'json'})}"
        try:
            result = await self._fetcher.fetch(
                lookup_url,
                timeout=self._settings.lookup_timeout,
                max_bytes=_OEMBED_MAX_BYTES,
            )
        except FetchError as e:
            logger.warning("oEmbed lookup failed for %s: %s", url, e.reason)
            return None

        if not result.ok:
            logger.warning(
                "oEmbed lookup for %s returned HTTP %d", url, result.status_code
            )
            return None
        if result.truncated:
            logger.warning("oEmbed response for %s exceeded size cap", url)
            return None

        try:
            data = json.loads(result.text)
        except (json.JSONDecodeError, ValueError):
            logger.warning("oEmbed response for %s is not JSON", url)
            return None

        if not isinstance(data, dict):
            return None
        return data

    async def _apply_oembed(self, url: str, builder: RecordBuilder) -> bool:
        data = await self.lookup_oembed(url)
        if data is None:
            return False

        def text(key: str) -> str | None:
            value = data.get(key)
            return clean_text(value) if isinstance(value, str) else None

        def link(key: str) -> str | None:
            value = data.get(key)
            if not isinstance(value, str):
                return None
            return value.strip() or None

        title = text("title")
        seeded = [
            builder.set_if_missing(
                "title", truncate(title, self._settings.max_title_length), "oembed"
            ),
            builder.set_if_missing("channel_name", text("author_name"), "oembed"),
            builder.set_if_missing("channel_url", link("author_url"), "oembed"),
            builder.set_if_missing("image_url", link("thumbnail_url"), "oembed"),
            builder.set_if_missing("site_name", text("provider_name"), "oembed"),
        ]
        return any(seeded)

    def _apply_page(self, markup: str, builder: RecordBuilder) -> None:
        max_scan = self._settings.max_json_scan_chars
        find = partial(attr.find_attribute, markup)
        video_fields: list[VideoObjectFields] = []

        def video_object() -> VideoObjectFields:
            if not video_fields:
                video_fields.append(read_video_object(iter_json_ld_blocks(markup)))
            return video_fields[0]

        def title_tag() -> str | None:
            return strip_suffix(attr.read_title_tag(markup), PLATFORM_TITLE_SUFFIX)

        fields: dict[str, list[Source]] = {
            "view_count": [
                ("viewCount-key", lambda: scan_view_count_keys(markup)),
                ("ytInitialData", lambda: read_initial_data_view_count(markup, max_scan)),
                ("json-ld:interactionStatistic", lambda: video_object().view_count),
                (
                    attr.ITEMPROP_INTERACTION_COUNT.source,
                    lambda: parse_abbreviated_count(
                        find(attr.ITEMPROP_INTERACTION_COUNT)
                    ),
                ),
                ("viewCount-text", lambda: scan_view_count_text(markup)),
            ],
            "title": [
                (attr.OG_TITLE.source, lambda: find(attr.OG_TITLE)),
                ("title-tag", title_tag),
                ("json-ld:name", lambda: video_object().title),
            ],
            "description": [
                (attr.OG_DESCRIPTION.source, lambda: find(attr.OG_DESCRIPTION)),
                ("json-ld:description", lambda: video_object().description),
            ],
            "image_url": [
                (attr.OG_IMAGE.source, lambda: find(attr.OG_IMAGE)),
                ("json-ld:thumbnailUrl", lambda: video_object().thumbnail_url),
            ],
            "channel_name": [
                (attr.ITEMPROP_CHANNEL_NAME.source, lambda: find(attr.ITEMPROP_CHANNEL_NAME)),
                ("ownerChannelName", lambda: read_owner_channel_name(markup)),
            ],
            "channel_url": [("itemprop:url", lambda: read_channel_link(markup))],
            "publish_date": [
                (attr.ITEMPROP_UPLOAD_DATE.source, lambda: find(attr.ITEMPROP_UPLOAD_DATE)),
                (
                    attr.ITEMPROP_DATE_PUBLISHED.source,
                    lambda: find(attr.ITEMPROP_DATE_PUBLISHED),
                ),
                ("json-ld:uploadDate", lambda: video_object().upload_date),
            ],
            "site_name": [(attr.OG_SITE_NAME.source, lambda: find(attr.OG_SITE_NAME))],
            "content_type_hint": [(attr.OG_TYPE.source, lambda: find(attr.OG_TYPE))],
            "canonical_url": [
                (attr.CANONICAL_LINK.source, lambda: find(attr.CANONICAL_LINK))
            ],
        }

        fill_fields(
            builder,
            fields,
            limits={
                "title": self._settings.max_title_length,
                "description": self._settings.max_description_length,
            },
        )
