"""
Common contract for extraction strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from linkscout.models.metadata import MetadataRecord
from linkscout.services.extraction.classifier import UrlClassification

PageLoader = Callable[[], Awaitable[str]]
"""Zero-argument coroutine returning the page body or raising ``FetchError``."""


class ExtractionStrategy(ABC):
    """
    Produces a ``MetadataRecord`` for a classified URL.

    The dispatcher owns page retrieval and hands strategies a ``PageLoader``
    so that each strategy decides when (and whether) the page is read.
    """

    @abstractmethod
    async def extract(
        self,
        url: str,
        classification: UrlClassification,
        load_page: PageLoader,
    ) -> MetadataRecord:
        """Build the record for *url*."""
        pass
