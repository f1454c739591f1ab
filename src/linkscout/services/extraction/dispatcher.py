"""
Dispatch between platform-specific and generic extraction.

``MetadataExtractor`` classifies a URL, selects the matching strategy and
owns retrieval of the page body. A page that cannot be retrieved at all is
reported as ``FetchError``; every finer-grained miss becomes an absent field.
"""

from __future__ import annotations

import logging

from linkscout.config.settings import Settings
from linkscout.config.settings import settings as default_settings
from linkscout.exceptions import FetchError
from linkscout.models.enums import Platform
from linkscout.models.metadata import MetadataRecord
from linkscout.services.extraction.base import ExtractionStrategy, PageLoader
from linkscout.services.extraction.classifier import classify_url
from linkscout.services.extraction.generic import GenericStrategy
from linkscout.services.extraction.youtube import YouTubeStrategy
from linkscout.services.http_fetcher import HttpFetcher
from linkscout.services.interfaces.fetcher_interface import FetcherInterface

logger = logging.getLogger(__name__)


class MetadataExtractor:
    """
    Entry point of the extraction engine.

    Holds no per-call state, so a single instance may serve concurrent
    extractions.

    Parameters
    ----------
    fetcher : FetcherInterface
        The network capability used for every outbound read.
    settings : Settings | None
        Timeouts, size caps and text limits (default: global settings).

    Examples
    --------
    >>> extractor = MetadataExtractor(fetcher=HttpFetcher())
    >>> record = await extractor.extract_metadata("https://youtu.be/dQw4w9WgXcQ")
    >>> record.record_kind
    <RecordKind.VIDEO: 'video'>
    """

    def __init__(
        self, fetcher: FetcherInterface, settings: Settings | None = None
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings or default_settings
        self._strategies: dict[Platform, ExtractionStrategy] = {
            Platform.YOUTUBE: YouTubeStrategy(fetcher, self._settings),
            Platform.GENERIC: GenericStrategy(self._settings),
        }

    async def extract_metadata(self, url: str) -> MetadataRecord:
        """
        Extract a metadata record for *url*.

        Parameters
        ----------
        url : str
            Any http(s) URL.

        Returns
        -------
        MetadataRecord
            A possibly sparse record; ``url`` and ``record_kind`` are always set.

        Raises
        ------
        ValueError
            If *url* is empty.
        FetchError
            If no page content could be obtained.
        """
        if not url or not url.strip():
            raise ValueError("URL must not be empty")

        classification = classify_url(url)
        strategy = self._strategies[classification.platform]
        logger.info(
            "Extracting %s with %s strategy", url, classification.platform.value
        )
        return await strategy.extract(url, classification, self._page_loader(url))

    def _page_loader(self, url: str) -> PageLoader:
        async def load() -> str:
            return await self.fetch_page(url)

        return load

    async def fetch_page(self, url: str) -> str:
        """
        Retrieve the page body for *url* once.

        Raises
        ------
        FetchError
            On transport failure, a non-2xx status or an empty body.
        """
        result = await self._fetcher.fetch(
            url,
            timeout=self._settings.page_timeout,
            max_bytes=self._settings.max_page_bytes,
        )
        if not result.ok:
            raise FetchError(url, reason="http_status", status_code=result.status_code)
        if not result.text.strip():
            raise FetchError(url, reason="empty_body", status_code=result.status_code)
        if result.truncated:
            logger.info(
                "Extracting from the first %d bytes of %s",
                self._settings.max_page_bytes,
                url,
            )
        return result.text


async def extract_metadata(url: str, settings: Settings | None = None) -> MetadataRecord:
    """Extract metadata for *url* using the default ``HttpFetcher``."""
    resolved = settings or default_settings
    extractor = MetadataExtractor(HttpFetcher(resolved), resolved)
    return await extractor.extract_metadata(url)
