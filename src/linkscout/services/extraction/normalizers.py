"""
Text normalizers for loosely formatted source text.

Pure functions that turn scraped strings into typed values: abbreviated
counts ("1.2M views" -> 1200000), entity/tag-stripped text, site-name
suffix removal and length truncation. None of them raise on bad input.
"""

from __future__ import annotations

import html
import math
import re

from bs4 import BeautifulSoup

# Numeric portion (digits with optional thousands separators and decimal
# point) followed by an optional K/M/B magnitude suffix.
_COUNT_RE = re.compile(
    r"(?<![\d.,])(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d+))?\s*([KMB])?(?![A-Za-z\d])",
    re.IGNORECASE,
)

_MAGNITUDES: dict[str, int] = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

_WHITESPACE_RE = re.compile(r"\s+")

# Separators commonly placed between a page title and the site name.
_SEPARATORS = ("|", "-", "–", "—", "·", "•")
_SITE_SUFFIX_RE = re.compile(r"\s+[|\-–—·•]\s+(?:(?!\s[|\-–—·•]\s).)+$")

_MAX_UNESCAPE_PASSES = 3


def parse_abbreviated_count(text: str | None) -> int | None:
    """
    Parse a human-readable count into an integer.

    Parameters
    ----------
    text : str | None
        Text such as ``"1.2M"``, ``"500K views"``, ``"1,234,567 views"``
        or ``"42"``.

    Returns
    -------
    int | None
        The rounded count, or ``None`` when *text* is empty, contains no
        numeric portion, or names a count too large to represent.

    Examples
    --------
    >>> parse_abbreviated_count("1.2M")
    1200000
    >>> parse_abbreviated_count("500K")
    500000
    >>> parse_abbreviated_count("No views") is None
    True
    """
    if not isinstance(text, str) or not text.strip():
        return None

    match = _COUNT_RE.search(text)
    if not match:
        return None

    whole, fraction, suffix = match.groups()
    try:
        value = float(f"{whole.replace(',', '')}.{fraction or '0'}")
    except ValueError:
        return None

    if suffix:
        value *= _MAGNITUDES[suffix.upper()]

    if not math.isfinite(value):
        return None

    # Half-up rounding; value is never negative here.
    return int(value + 0.5)


def clean_text(raw: str | None) -> str | None:
    """
    Unescape entities, drop markup tags and collapse whitespace.

    Entities are unescaped repeatedly so doubly-encoded text such as
    ``&amp;amp;`` resolves to ``&``.

    Returns
    -------
    str | None
        Cleaned text, or ``None`` if nothing remains.
    """
    if not isinstance(raw, str):
        return None

    text = raw
    for _ in range(_MAX_UNESCAPE_PASSES):
        unescaped = html.unescape(text)
        if unescaped == text:
            break
        text = unescaped

    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text or None


def strip_suffix(title: str | None, suffix: str) -> str | None:
    """
    Remove a trailing separator-delimited *suffix* from *title*.

    ``strip_suffix("Cats - YouTube", "YouTube")`` returns ``"Cats"``. The
    comparison is case-insensitive; titles without the suffix are returned
    unchanged.
    """
    if not title:
        return title
    if not suffix:
        return title.strip()

    stripped = title.rstrip()
    if not stripped.lower().endswith(suffix.lower()):
        return stripped

    head = stripped[: len(stripped) - len(suffix)].rstrip()
    for separator in _SEPARATORS:
        if head.endswith(separator):
            remainder = head[: -len(separator)].rstrip()
            return remainder or stripped
    return stripped


def strip_site_suffix(title: str | None) -> str | None:
    """
    Remove the last `` | Site`` style segment from a page title.

    Used when the site name is not known. Only spaced separators count, so
    hyphenated words are left alone.
    """
    if not title:
        return title
    stripped = _SITE_SUFFIX_RE.sub("", title.strip()).strip()
    return stripped or title.strip()


def truncate(text: str | None, limit: int) -> str | None:
    """Trim *text* to at most *limit* characters, ending in an ellipsis."""
    if text is None or len(text) <= limit:
        return text
    if limit <= 1:
        return text[:limit]
    return text[: limit - 1].rstrip() + "…"
