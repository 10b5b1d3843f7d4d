"""Small text helpers shared by the profile repository and context assembler."""

from __future__ import annotations

import re

ELLIPSIS = "..."

# Boundary between a lowercase letter/digit and an uppercase letter, or
# inside an acronym run followed by a capitalised word ("HTMLParser").
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def truncate(text: str, limit: int) -> str:
    """Cut *text* to *limit* characters, appending ``...`` when anything was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def humanize_key(key: str) -> str:
    """Render a camelCase attribute key as a label.

    ``brandName`` -> ``Brand Name``, ``doNotSay`` -> ``Do Not Say``.
    Only the first letter is forced upper-case; the rest of each word keeps
    its original casing.
    """
    if not key:
        return key
    spaced = _CAMEL_BOUNDARY.sub(" ", key)
    return spaced[0].upper() + spaced[1:]
