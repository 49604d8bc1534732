"""Case-insensitive substring matching shared by search and filters.

Pure text operations with zero domain dependencies.
"""
from __future__ import annotations


def matches(haystack: str | None, needle: str) -> bool:
    """Return True if *needle* is empty or occurs in *haystack* ignoring case.

    Comparison uses ``str.casefold`` so that e.g. ``"STRASSE"`` matches
    ``"straße"``. A ``None`` haystack is treated as the empty string.
    """
    if not needle:
        return True
    if not haystack:
        return False
    return needle.casefold() in haystack.casefold()


def matches_name_or_number(name: str | None, number: str | None, needle: str) -> bool:
    """Match *needle* against either a record's name or its number."""
    return matches(name, needle) or matches(number, needle)
