"""
Segment naming helpers shared by the registry, validator and exporter.
"""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[-_\s]+")


def export_key(segment: str) -> str:
    """
    Convert a group or variable name into an exported key.

    Keys are lower camel case with separators removed:
    ``FontSize`` -> ``fontSize``, ``font-size`` -> ``fontSize``,
    ``Grey 900`` -> ``grey900``, ``URL`` -> ``url``,
    ``HTTPServer`` -> ``httpServer``. Already-converted keys are returned
    unchanged.
    """
    parts = [p for p in _SEPARATORS.split(segment.strip()) if p]
    if not parts:
        return ""

    def _lower_first(part: str) -> str:
        end = 0
        while end < len(part) and part[end].isupper():
            end += 1
        # "HTTPServer" -> "httpServer": the last capital starts the next word.
        if end > 1 and end < len(part) and part[end].islower():
            end -= 1
        return part[:end].lower() + part[end:]

    def _upper_first(part: str) -> str:
        if part.isupper() and len(part) > 1:
            part = part.lower()
        return part[0].upper() + part[1:]

    return _lower_first(parts[0]) + "".join(_upper_first(p) for p in parts[1:])


def segment_key(segment: str) -> str:
    """Case-insensitive matching key for a segment."""
    return export_key(segment).casefold()


def invalid_segment_reason(segment: str) -> str | None:
    """Return why a segment name is not allowed, or None if it is fine."""
    if not segment:
        return "empty name"
    if segment != segment.strip():
        return "surrounding whitespace"
    if "/" in segment or "." in segment:
        return "contains a path separator"
    if not export_key(segment):
        return "no usable characters"
    return None
