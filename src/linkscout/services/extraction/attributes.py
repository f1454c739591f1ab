"""
Attribute extractors over raw markup.

Each extractor is a declared ``AttributePattern``: which tag to look at, which
attribute identifies it (``property="og:title"``, ``name="author"``,
``rel="canonical"``...) and which attribute carries the value. Patterns are
evaluated independently and are insensitive to attribute order, quoting and
the letter case of attribute names and key values.
"""

from __future__ import annotations

from dataclasses import dataclass

from linkscout.services.extraction.markup import (
    attribute_value,
    iter_elements,
    iter_tags,
)
from linkscout.services.extraction.normalizers import clean_text


@dataclass(frozen=True)
class AttributePattern:
    """
    A (tag, key attribute, key value) -> value attribute lookup.

    Attributes
    ----------
    source : str
        Name used in logs and resolution diagnostics.
    tag : str
        Element name, ``"meta"`` or ``"link"``.
    key_attrs : tuple[str, ...]
        Attributes that may carry *key_value*. Social-preview tags are
        published under both ``property`` and ``name`` in the wild.
    key_value : str
        Expected key, compared case-insensitively. For ``rel`` the value is
        matched as one of the space-separated tokens.
    value_attr : str
        Attribute holding the extracted value.
    """

    source: str
    tag: str
    key_attrs: tuple[str, ...]
    key_value: str
    value_attr: str = "content"

    def matches(self, attrs: dict[str, str]) -> bool:
        """Return True when a tag's attributes carry this pattern's key."""
        expected = self.key_value.lower()
        for key_attr in self.key_attrs:
            actual = attrs.get(key_attr)
            if actual is None:
                continue
            actual = actual.strip().lower()
            if key_attr == "rel":
                if expected in actual.split():
                    return True
            elif actual == expected:
                return True
        return False


def _og(prop: str) -> AttributePattern:
    return AttributePattern(prop, "meta", ("property", "name"), prop)


def _named(name: str) -> AttributePattern:
    return AttributePattern(f"meta:{name}", "meta", ("name",), name)


def _itemprop(prop: str, tag: str = "meta", value_attr: str = "content") -> AttributePattern:
    return AttributePattern(f"itemprop:{prop}", tag, ("itemprop",), prop, value_attr)


# Social-preview properties
OG_TITLE = _og("og:title")
OG_DESCRIPTION = _og("og:description")
OG_IMAGE = _og("og:image")
OG_SITE_NAME = _og("og:site_name")
OG_TYPE = _og("og:type")
ARTICLE_PUBLISHED_TIME = _og("article:published_time")
ARTICLE_AUTHOR = _og("article:author")

# Standard name attributes
META_DESCRIPTION = _named("description")
META_AUTHOR = _named("author")

DATE_META_PATTERNS: tuple[AttributePattern, ...] = tuple(
    _named(name)
    for name in (
        "date",
        "pubdate",
        "publishdate",
        "publish-date",
        "dc.date",
        "dc.date.issued",
        "sailthru.date",
        "parsely-pub-date",
    )
)

CANONICAL_LINK = AttributePattern("link:canonical", "link", ("rel",), "canonical", "href")

# Microdata used on video watch pages
ITEMPROP_UPLOAD_DATE = _itemprop("uploadDate")
ITEMPROP_DATE_PUBLISHED = _itemprop("datePublished")
ITEMPROP_INTERACTION_COUNT = _itemprop("interactionCount")
ITEMPROP_CHANNEL_NAME = _itemprop("name", tag="link")


def find_attribute(markup: str, pattern: AttributePattern) -> str | None:
    """
    Return the cleaned value of the first tag matching *pattern*.

    Tags that match but carry an empty value are skipped so a later
    duplicate can still supply the field.
    """
    for attrs in iter_tags(markup, pattern.tag):
        if not pattern.matches(attrs):
            continue
        raw = attribute_value(attrs, pattern.value_attr)
        value = raw.strip() if pattern.value_attr == "href" else clean_text(raw)
        if value:
            return value
    return None


def find_first_attribute(
    markup: str, patterns: tuple[AttributePattern, ...]
) -> str | None:
    """Try *patterns* in order and return the first non-empty value."""
    for pattern in patterns:
        value = find_attribute(markup, pattern)
        if value:
            return value
    return None


def read_title_tag(markup: str) -> str | None:
    """Return the cleaned text of the first non-empty ``<title>`` element."""
    for _attrs, inner in iter_elements(markup, "title"):
        title = clean_text(inner)
        if title:
            return title
    return None
