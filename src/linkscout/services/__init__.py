"""
Services module for linkscout.

Contains the metadata extraction engine and the HTTP fetch capability it
consumes.
"""

from __future__ import annotations

from linkscout.services.extraction import MetadataExtractor, extract_metadata
from linkscout.services.http_fetcher import HttpFetcher

__all__: list[str] = ["HttpFetcher", "MetadataExtractor", "extract_metadata"]
