"""
Ordered fallback resolution shared by every extraction strategy.

A field is described by a list of ``(source_name, extractor)`` pairs in
priority order. ``resolve_first`` calls them in turn and keeps the first
non-empty value; later sources are not consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any

from linkscout.models.metadata import RecordBuilder
from linkscout.services.extraction.normalizers import truncate

logger = logging.getLogger(__name__)

Source = tuple[str, Callable[[], Any]]


@dataclass(frozen=True)
class Resolution:
    """A resolved value and the name of the source that produced it."""

    value: Any
    source: str


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_first(sources: Sequence[Source]) -> Resolution | None:
    """
    Return the first non-empty value produced by *sources*.

    An extractor that raises is logged and treated as having found nothing,
    so one malformed fragment cannot stop the remaining sources.

    Parameters
    ----------
    sources : Sequence[Source]
        ``(name, zero-argument callable)`` pairs in priority order.

    Returns
    -------
    Resolution | None
        The winning value and source, or ``None`` when every source missed.
    """
    for name, extractor in sources:
        try:
            value = extractor()
        except Exception:
            logger.debug("Source %s failed", name, exc_info=True)
            continue
        if not _is_empty(value):
            return Resolution(value=value, source=name)
        logger.debug("Source %s yielded nothing", name)
    return None


def fill_field(
    builder: RecordBuilder,
    field: str,
    sources: Sequence[Source],
    transform: Callable[[Any], Any] | None = None,
) -> bool:
    """
    Resolve *field* from *sources* unless the builder already holds it.

    *transform*, when given, is applied to the winning value (e.g. length
    truncation). Returns True when the field was populated by this call.
    """
    if builder.has(field):
        return False
    resolution = resolve_first(sources)
    if resolution is None:
        return False
    value = resolution.value
    if transform is not None:
        value = transform(value)
    return builder.set_if_missing(field, value, resolution.source)


def fill_fields(
    builder: RecordBuilder,
    fields: Mapping[str, Sequence[Source]],
    limits: Mapping[str, int] | None = None,
) -> None:
    """
    Resolve every field in *fields*, in mapping order.

    String fields named in *limits* are truncated to that many characters.
    """
    limits = limits or {}
    for field, sources in fields.items():
        limit = limits.get(field)
        transform = partial(truncate, limit=limit) if limit else None
        fill_field(builder, field, sources, transform=transform)
