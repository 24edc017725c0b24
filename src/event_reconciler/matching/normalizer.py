"""Event name normalization utilities.

Catalog names and scraped page titles describe the same event with
different decoration: distance suffixes ("| 21.1k"), edition and season
counters, sponsor tails and different years. Normalization strips that
decoration so the similarity scorer compares only the identifying part.
"""

import re

SENTINEL_YEAR = "2025"

_WHITESPACE = re.compile(r"\s+")
_TRAILING_DISTANCE = re.compile(r"(?<![\d.])\d+(?:\.\d+)?\s?km?\s*$", re.IGNORECASE)
_EDITION_SEASON = re.compile(r"\b(?:edition|season)\s*\d+\b", re.IGNORECASE)
_YEAR = re.compile(r"(?<!\d)\d{4}(?!\d)")
_SPONSOR_TAIL = re.compile(r"(?:powered|sponsored)\s+by\b.*$", re.IGNORECASE)
_EMPTY_BRACKETS = re.compile(r"\(\s*\)|\[\s*\]")


def _normalize_once(name: str) -> str:
    normalized = name.lower().replace("|", "")
    normalized = _WHITESPACE.sub(" ", normalized)
    normalized = _TRAILING_DISTANCE.sub("", normalized)
    normalized = _EDITION_SEASON.sub("", normalized)
    normalized = _YEAR.sub(SENTINEL_YEAR, normalized)
    normalized = _SPONSOR_TAIL.sub("", normalized)
    normalized = _EMPTY_BRACKETS.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def normalize_event_name(name: str | None) -> str:
    """Normalize an event name for comparison.

    Applies, until the result stops changing:
    - Lowercase, drop pipe characters, collapse whitespace
    - Strip a trailing distance token (``10k``, ``21.1k``, ``42km``)
    - Strip ``edition N`` / ``season N`` counters
    - Replace every 4-digit run with a sentinel year
    - Strip ``powered by ...`` / ``sponsored by ...`` tails
    - Drop brackets emptied by the steps above, trim

    Iterating to a fixed point makes the function idempotent even when one
    step exposes a new trailing token for another.

    Args:
        name: Raw event name.

    Returns:
        Normalized name ("" for empty input).

    Example:
        >>> normalize_event_name("SHERPUR HALF MARATHON 2024 | 21.1k")
        'sherpur half marathon 2025'
        >>> normalize_event_name("Chuti Resort Ultra 2025 (Season 2) | 50k")
        'chuti resort ultra 2025'
    """
    if not name:
        return ""

    current = name
    while True:
        normalized = _normalize_once(current)
        if normalized == current:
            return normalized
        current = normalized


def names_are_equivalent(name1: str | None, name2: str | None) -> bool:
    """Check if two names are equivalent after normalization.

    Args:
        name1: First name.
        name2: Second name.

    Returns:
        True if names are equivalent.
    """
    return normalize_event_name(name1) == normalize_event_name(name2)
