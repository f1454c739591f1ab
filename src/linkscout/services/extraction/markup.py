"""
Regex-level tag scanning over raw markup.

The engine never assumes well-formed HTML, so instead of building a document
tree it scans for individual start tags and tokenizes their attributes.
Attribute names are lowercased; quoting style and attribute order do not
matter.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterator

_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)          # name
        (?:\s*=\s*
          (?:"([^"]*)"          # double-quoted value
            |'([^']*)'          # single-quoted value
            |([^\s"'=<>`]+)     # unquoted value
          )
        )?""",
    re.VERBOSE,
)

_TAG_CACHE: dict[str, re.Pattern[str]] = {}


def _start_tag_re(tag: str) -> re.Pattern[str]:
    pattern = _TAG_CACHE.get(tag)
    if pattern is None:
        pattern = re.compile(
            rf"<{re.escape(tag)}\b((?:[^>\"']|\"[^\"]*\"|'[^']*')*)/?>",
            re.IGNORECASE,
        )
        _TAG_CACHE[tag] = pattern
    return pattern


def parse_attributes(attr_text: str) -> dict[str, str]:
    """
    Tokenize the attribute portion of a start tag.

    The first occurrence of a repeated attribute wins. Values are returned
    with entities left intact; valueless attributes map to ``""``.
    """
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(attr_text):
        name = match.group(1).lower()
        if name in attrs:
            continue
        value = next((g for g in match.groups()[1:] if g is not None), "")
        attrs[name] = value
    return attrs


def iter_tags(markup: str, tag: str) -> Iterator[dict[str, str]]:
    """Yield the attribute dict of every ``<tag ...>`` start tag in *markup*."""
    for match in _start_tag_re(tag).finditer(markup):
        yield parse_attributes(match.group(1))


def iter_elements(markup: str, tag: str) -> Iterator[tuple[dict[str, str], str]]:
    """
    Yield ``(attributes, inner_text)`` for each ``<tag>...</tag>`` element.

    Only suitable for raw-text elements such as ``<script>`` and ``<title>``
    whose content cannot nest the same tag.
    """
    element_re = re.compile(
        rf"<{re.escape(tag)}\b((?:[^>\"']|\"[^\"]*\"|'[^']*')*)>(.*?)</{re.escape(tag)}\s*>",
        re.IGNORECASE | re.DOTALL,
    )
    for match in element_re.finditer(markup):
        yield parse_attributes(match.group(1)), match.group(2)


def attribute_value(attrs: dict[str, str], name: str) -> str:
    """Return the entity-decoded value of *name*, or ``""``."""
    return html.unescape(attrs.get(name, ""))
