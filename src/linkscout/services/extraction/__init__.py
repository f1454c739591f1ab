"""
Content metadata extraction engine.

Modules
-------
normalizers
    Count parsing, text cleaning, suffix stripping and truncation.
json_scanner
    Bounded balanced-brace scanner for embedded JSON objects.
markup
    Regex-level tag and attribute scanning.
structured_data
    JSON-LD block readers.
attributes
    Declared meta/link attribute extractors.
resolver
    Ordered first-non-empty fallback resolution.
generic
    Strategy for article-like pages.
youtube
    Strategy for YouTube video URLs.
classifier
    URL classification.
dispatcher
    ``MetadataExtractor``, the engine entry point.
"""

from linkscout.services.extraction.classifier import (
    UrlClassification,
    classify_url,
    extract_youtube_id,
)
from linkscout.services.extraction.dispatcher import MetadataExtractor, extract_metadata
from linkscout.services.extraction.generic import GenericStrategy
from linkscout.services.extraction.normalizers import parse_abbreviated_count
from linkscout.services.extraction.youtube import YouTubeStrategy

__all__ = [
    "GenericStrategy",
    "MetadataExtractor",
    "UrlClassification",
    "YouTubeStrategy",
    "classify_url",
    "extract_metadata",
    "extract_youtube_id",
    "parse_abbreviated_count",
]
