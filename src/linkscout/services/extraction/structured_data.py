"""
Readers for embedded JSON-LD structured-data blocks.

Every ``<script type="application/ld+json">`` block is parsed independently;
a malformed block is skipped without affecting the others. Typed objects are
found directly, inside an ``@graph`` container, or inside a top-level array.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from linkscout.services.extraction.markup import iter_elements
from linkscout.services.extraction.normalizers import (
    clean_text,
    parse_abbreviated_count,
)

logger = logging.getLogger(__name__)

_GRAPH_KEY = "@graph"
_LD_JSON_TYPE = "application/ld+json"


@dataclass(frozen=True)
class VideoObjectFields:
    """Fields read from a schema.org ``VideoObject``."""

    title: str | None = None
    description: str | None = None
    upload_date: str | None = None
    thumbnail_url: str | None = None
    view_count: int | None = None


def iter_json_ld_blocks(markup: str) -> Iterator[Any]:
    """
    Yield each successfully parsed JSON-LD document in *markup*.

    The script ``type`` may carry parameters (``application/ld+json;
    charset=utf-8``) and any letter case. Blocks that fail to decode are
    logged at DEBUG level and skipped.
    """
    for index, (attrs, body) in enumerate(iter_elements(markup, "script")):
        script_type = attrs.get("type", "").split(";", 1)[0].strip().lower()
        if script_type != _LD_JSON_TYPE:
            continue
        payload = body.strip()
        # Some CMSes wrap the block in an HTML comment or CDATA section.
        for prefix, suffix in (("<!--", "-->"), ("//<![CDATA[", "//]]>")):
            if payload.startswith(prefix) and payload.endswith(suffix):
                payload = payload[len(prefix) : -len(suffix)].strip()
        if not payload:
            continue
        try:
            yield json.loads(payload)
        except (json.JSONDecodeError, ValueError) as exc:
            logger.debug("Skipping malformed JSON-LD block #%d: %s", index, exc)


def _type_matches(node: dict[str, Any], type_name: str) -> bool:
    declared = node.get("@type")
    if isinstance(declared, list):
        return any(_short_type(t) == type_name for t in declared)
    return _short_type(declared) == type_name


def _short_type(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    # "http://schema.org/VideoObject" -> "VideoObject"
    return value.rstrip("/").rsplit("/", 1)[-1]


def _candidate_nodes(data: Any) -> Iterator[dict[str, Any]]:
    """Yield the top-level node, then ``@graph`` members, then array members."""
    if isinstance(data, dict):
        yield data
        graph = data.get(_GRAPH_KEY)
        if isinstance(graph, list):
            for item in graph:
                if isinstance(item, dict):
                    yield item
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                yield item
                graph = item.get(_GRAPH_KEY)
                if isinstance(graph, list):
                    yield from (g for g in graph if isinstance(g, dict))


def find_typed_object(data: Any, type_name: str) -> dict[str, Any] | None:
    """Return the first node in *data* whose ``@type`` is *type_name*."""
    for node in _candidate_nodes(data):
        if _type_matches(node, type_name):
            return node
    return None


def _first_string(value: Any) -> str | None:
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, list):
        for item in value:
            found = _first_string(item)
            if found:
                return found
    return None


def _image_url(value: Any) -> str | None:
    """Thumbnail may be a string, a list, or an ImageObject with ``url``."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for item in value:
            found = _image_url(item)
            if found:
                return found
    if isinstance(value, dict):
        return _image_url(value.get("url") or value.get("contentUrl"))
    return None


def _person_name(value: Any) -> str | None:
    """Author may be a plain string, a ``{name}`` object or a list of either."""
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, dict):
        return _person_name(value.get("name"))
    if isinstance(value, list):
        names = [name for name in (_person_name(v) for v in value) if name]
        return ", ".join(names) if names else None
    return None


def _count_value(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value + 0.5)
    if isinstance(value, str):
        return parse_abbreviated_count(value)
    return None


def _interaction_count(video: dict[str, Any]) -> int | None:
    """
    Read a view count from the several shapes publishers use.

    Checked in order: ``interactionStatistic`` counters (preferring a
    ``WatchAction``), an ``aggregateRating`` carrying an interaction/view
    count, then a bare ``interactionCount``.
    """
    stats = video.get("interactionStatistic")
    if isinstance(stats, dict):
        stats = [stats]
    if isinstance(stats, list):
        counters = [s for s in stats if isinstance(s, dict)]
        watch = [
            s for s in counters if _short_type(_interaction_type(s)) == "WatchAction"
        ]
        for counter in watch + counters:
            count = _count_value(counter.get("userInteractionCount"))
            if count is not None:
                return count

    rating = video.get("aggregateRating")
    if isinstance(rating, dict):
        for key in ("interactionCount", "viewCount", "userInteractionCount"):
            count = _count_value(rating.get(key))
            if count is not None:
                return count

    return _count_value(video.get("interactionCount"))


def _interaction_type(counter: dict[str, Any]) -> Any:
    kind = counter.get("interactionType")
    if isinstance(kind, dict):
        return kind.get("@type")
    return kind


_VIDEO_FIELD_READERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "title": lambda video: _first_string(video.get("name"))
    or _first_string(video.get("headline")),
    "description": lambda video: _first_string(video.get("description")),
    "upload_date": lambda video: _first_string(video.get("uploadDate")),
    "thumbnail_url": lambda video: _image_url(video.get("thumbnailUrl"))
    or _image_url(video.get("thumbnail")),
    "view_count": _interaction_count,
}


def read_video_object(blocks: Iterable[Any]) -> VideoObjectFields:
    """
    Merge ``VideoObject`` fields across *blocks*; the first non-empty wins.

    Each field is read independently, so a value that cannot be converted
    (e.g. a non-finite count) leaves only that field empty.
    """
    values: dict[str, Any] = {}
    for index, data in enumerate(blocks):
        video = find_typed_object(data, "VideoObject")
        if video is None:
            continue
        for key, reader in _VIDEO_FIELD_READERS.items():
            if key in values:
                continue
            try:
                value = reader(video)
            except (TypeError, ValueError, OverflowError) as exc:
                logger.debug("Skipping VideoObject %s in block #%d: %s", key, index, exc)
                continue
            if value is not None:
                values[key] = value
    return VideoObjectFields(**values)


def _read_field(blocks: Iterable[Any], key: str, reader: Any) -> str | None:
    for data in blocks:
        for node in _candidate_nodes(data):
            value = reader(node.get(key))
            if value:
                return value
    return None


def read_date_published(blocks: Iterable[Any]) -> str | None:
    """First non-empty ``datePublished`` across *blocks*."""
    return _read_field(blocks, "datePublished", _first_string)


def read_author(blocks: Iterable[Any]) -> str | None:
    """First non-empty ``author`` name across *blocks*."""
    return _read_field(blocks, "author", _person_name)
