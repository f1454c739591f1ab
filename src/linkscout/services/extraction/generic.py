"""
Generic extraction strategy for article-like pages.

Combines attribute extractors and JSON-LD readers into an ``article`` record.
Each field has its own ordered source list; the first non-empty source wins.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from linkscout.config.settings import Settings
from linkscout.config.settings import settings as default_settings
from linkscout.models.enums import RecordKind
from linkscout.models.metadata import MetadataRecord, RecordBuilder
from linkscout.services.extraction import attributes as attr
from linkscout.services.extraction.base import ExtractionStrategy, PageLoader
from linkscout.services.extraction.classifier import UrlClassification
from linkscout.services.extraction.normalizers import strip_site_suffix
from linkscout.services.extraction.resolver import Source, fill_fields
from linkscout.services.extraction.structured_data import (
    iter_json_ld_blocks,
    read_author,
    read_date_published,
)

logger = logging.getLogger(__name__)


class _LazyBlocks:
    """Parses JSON-LD blocks on first use; most pages resolve without them."""

    def __init__(self, markup: str) -> None:
        self._markup = markup
        self._blocks: list[Any] | None = None

    def get(self) -> list[Any]:
        if self._blocks is None:
            self._blocks = list(iter_json_ld_blocks(self._markup))
        return self._blocks


class GenericStrategy(ExtractionStrategy):
    """
    Best-effort metadata for any page.

    Parameters
    ----------
    settings : Settings | None
        Supplies title/description length limits.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or default_settings

    async def extract(
        self,
        url: str,
        classification: UrlClassification,
        load_page: PageLoader,
    ) -> MetadataRecord:
        """Fetch the page and extract an ``article`` record from it."""
        markup = await load_page()
        return self.extract_from_html(url, markup)

    def extract_from_html(self, url: str, markup: str) -> MetadataRecord:
        """
        Build an ``article`` record from raw markup.

        Parameters
        ----------
        url : str
            The source URL, copied verbatim onto the record.
        markup : str
            Raw page HTML; may be empty or malformed.

        Returns
        -------
        MetadataRecord
            Record whose absent fields simply had no source.
        """
        builder = RecordBuilder(url, RecordKind.ARTICLE)
        blocks = _LazyBlocks(markup)
        find = partial(attr.find_attribute, markup)

        def title_tag() -> str | None:
            return strip_site_suffix(attr.read_title_tag(markup))

        fields: dict[str, list[Source]] = {
            "title": [
                (attr.OG_TITLE.source, lambda: find(attr.OG_TITLE)),
                ("title-tag", title_tag),
            ],
            "description": [
                (attr.OG_DESCRIPTION.source, lambda: find(attr.OG_DESCRIPTION)),
                (attr.META_DESCRIPTION.source, lambda: find(attr.META_DESCRIPTION)),
            ],
            "publish_date": [
                (
                    attr.ARTICLE_PUBLISHED_TIME.source,
                    lambda: find(attr.ARTICLE_PUBLISHED_TIME),
                ),
                (
                    "meta:date",
                    lambda: attr.find_first_attribute(markup, attr.DATE_META_PATTERNS),
                ),
                ("json-ld:datePublished", lambda: read_date_published(blocks.get())),
            ],
            "author": [
                (attr.ARTICLE_AUTHOR.source, lambda: find(attr.ARTICLE_AUTHOR)),
                (attr.META_AUTHOR.source, lambda: find(attr.META_AUTHOR)),
                ("json-ld:author", lambda: read_author(blocks.get())),
            ],
            "site_name": [(attr.OG_SITE_NAME.source, lambda: find(attr.OG_SITE_NAME))],
            "image_url": [(attr.OG_IMAGE.source, lambda: find(attr.OG_IMAGE))],
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

        logger.debug("Generic extraction for %s used sources %s", url, builder.sources)
        return builder.build()

