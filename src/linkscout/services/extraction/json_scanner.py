"""
Bounded scanner for JSON objects embedded in larger text.

Pages frequently assign client state to a script variable
(``var ytInitialData = {...};``). A non-greedy regex cannot delimit such
objects, so the scanner counts braces while honouring JSON string literals,
and gives up once a fixed window has been examined.
"""

from __future__ import annotations

import re

DEFAULT_MAX_SCAN_CHARS = 2_000_000


def extract_json_object(
    text: str, start: int = 0, max_scan: int = DEFAULT_MAX_SCAN_CHARS
) -> str | None:
    """
    Extract a balanced ``{...}`` object from *text*.

    Leading whitespace at *start* is skipped; the first non-blank character
    must be ``{``.

    Parameters
    ----------
    text : str
        Text containing the object.
    start : int
        Position at which the object (or whitespace before it) begins.
    max_scan : int
        Maximum number of characters to examine from the opening brace.

    Returns
    -------
    str | None
        The balanced JSON string, or ``None`` when there is no opening brace,
        the braces never balance, or the window is exhausted first.
    """
    length = len(text)
    while start < length and text[start].isspace():
        start += 1

    if start >= length or text[start] != "{":
        return None

    depth = 0
    in_string = False
    escape = False
    limit = min(length, start + max_scan)

    for i in range(start, limit):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def find_json_after_marker(
    text: str, marker: str, max_scan: int = DEFAULT_MAX_SCAN_CHARS
) -> str | None:
    """
    Locate *marker* followed by ``=`` and return the object assigned to it.

    Handles ``var ytInitialData = {``, ``window["ytInitialData"] = {`` and
    bare ``ytInitialData = {`` forms. Every occurrence of the marker is tried
    in order until one yields a balanced object.
    """
    pattern = re.compile(re.escape(marker) + r'(?:"\])?\s*=\s*')
    for match in pattern.finditer(text):
        json_str = extract_json_object(text, match.end(), max_scan)
        if json_str is not None:
            return json_str
    return None
