"""Heuristic rule tables for event page text extraction.

Scraped event pages are mostly chrome: navigation labels, login prompts,
legal footers, RSVP counters. The tables below describe that chrome as data
so the extraction rules can change without touching the matching code.
"""

import re
from dataclasses import dataclass, field

_URL = re.compile(r"^(?:https?://|www\.)\S+$", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionRules:
    """Rules driving ``HeuristicTextExtractor``.

    Attributes:
        access_markers: Substrings that mark a login wall or denied page.
        chrome_substrings: Navigation labels; lines containing them are skipped.
        timestamp_pattern: Timestamp-shaped lines, skipped as chrome.
        min_line_length: Lines shorter than this are skipped.
        min_title_length: Inclusive lower bound for a title candidate.
        max_title_length: Exclusive upper bound for a title candidate.
        boilerplate_substrings: Marketing/legal text that is never a title.
        region_tokens: Place names that mark a location line.
        confirm_substrings: Substrings of a line that follows a title.
        confirm_exact: Whole lines that follow a title.
        lookahead: Number of lines after a candidate inspected for confirmation.
    """

    access_markers: tuple[str, ...] = (
        "You must log in to continue",
        "Log in to Facebook",
    )
    chrome_substrings: tuple[str, ...] = (
        "Log in",
        "Forgotten account",
        "Events",
        "Home",
        "Categories",
    )
    timestamp_pattern: re.Pattern[str] = field(
        default_factory=lambda: re.compile(
            r"\bat\s+\d{1,2}:\d{2}\b|\b(?:UTC|GMT)\s?[+-]\d{1,2}\b|\bat\b.*\+\d{2}(?::?\d{2})?$"
        )
    )
    min_line_length: int = 5
    min_title_length: int = 10
    max_title_length: int = 200
    boilerplate_substrings: tuple[str, ...] = (
        "facebook.com",
        "Privacy",
        "Terms",
        "Advertising",
        "people responded",
        "Event by",
        "Public",
        "Anyone on or off Facebook",
        "Invite",
        "Details",
        "Duration",
    )
    region_tokens: tuple[str, ...] = ("Division", "Bangladesh")
    confirm_substrings: tuple[str, ...] = (",", "Online event")
    confirm_exact: tuple[str, ...] = ("Invite", "Details")
    lookahead: int = 3

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.min_title_length > self.max_title_length:
            msg = "min_title_length must not exceed max_title_length"
            raise ValueError(msg)
        if self.lookahead < 1:
            msg = "lookahead must be at least 1"
            raise ValueError(msg)

    def is_access_denied(self, blob: str) -> bool:
        """Whether the blob is a login wall or access-denied page."""
        return any(marker in blob for marker in self.access_markers)

    def is_chrome(self, line: str) -> bool:
        """Whether a stripped line is navigation chrome."""
        if len(line) < self.min_line_length or line.isdigit():
            return True
        if any(label in line for label in self.chrome_substrings):
            return True
        return bool(self.timestamp_pattern.search(line))

    def is_title_candidate(self, line: str) -> bool:
        """Whether a non-chrome line may be an event title."""
        if not self.min_title_length <= len(line) < self.max_title_length:
            return False
        if _URL.match(line):
            return False
        return not any(text in line for text in self.boilerplate_substrings)

    def confirms_title(self, line: str) -> bool:
        """Whether a line following a candidate marks it as the title."""
        if line in self.confirm_exact:
            return True
        if any(text in line for text in self.confirm_substrings):
            return True
        return any(token in line for token in self.region_tokens)


DEFAULT_RULES = ExtractionRules()
