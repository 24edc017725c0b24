"""Event name extraction from raw page text.

Defines the ``TextExtractor`` capability used by the reference index and a
heuristic implementation driven by ``ExtractionRules``:

1. Pages carrying an access marker are rejected outright.
2. Remaining lines are scanned top to bottom, skipping navigation chrome.
3. The first title-shaped line followed (within a few lines) by a
   location/metadata line is taken as the event name.

The result distinguishes "no name found" from "page not accessible" so the
two are never conflated downstream.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from event_reconciler.extraction.dates import extract_date_line
from event_reconciler.extraction.rules import DEFAULT_RULES, ExtractionRules
from event_reconciler.matching.normalizer import normalize_event_name
from event_reconciler.models.catalog import ExtractedFact

logger = structlog.get_logger(__name__)


class ExtractionStatus(str, Enum):
    """Outcome of extracting a raw entry."""

    EXTRACTED = "extracted"
    NO_NAME = "no_name"
    ACCESS_DENIED = "access_denied"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class ExtractionResult:
    """Result of running a TextExtractor on one raw entry.

    Attributes:
        entry_id: Raw entry id.
        status: Extraction outcome.
        fact: Extracted fact; set for EXTRACTED and NO_NAME (date only).
        detail: Explanation for failures.
    """

    entry_id: str
    status: ExtractionStatus
    fact: ExtractedFact | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Whether a name was extracted."""
        return self.status is ExtractionStatus.EXTRACTED

    @classmethod
    def unreadable(cls, entry_id: str, detail: str) -> "ExtractionResult":
        """Build the result for an entry whose text could not be read."""
        return cls(entry_id=entry_id, status=ExtractionStatus.UNREADABLE, detail=detail)


class TextExtractor(Protocol):
    """Capability that turns a raw text blob into an ExtractionResult."""

    def extract(self, entry_id: str, blob: str) -> ExtractionResult:
        """Extract the event name and date from a raw blob."""
        ...


class HeuristicTextExtractor:
    """Line-scanning extractor for scraped event pages.

    Example:
        >>> extractor = HeuristicTextExtractor()
        >>> result = extractor.extract("123", "Dhaka Half Marathon 2025\\nDhaka, Bangladesh")
        >>> result.fact.name
        'Dhaka Half Marathon 2025'
    """

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES) -> None:
        """Initialize the extractor.

        Args:
            rules: Rule tables describing page chrome and title markers.
        """
        self.rules = rules

    def extract(self, entry_id: str, blob: str) -> ExtractionResult:
        """Extract the event name and date from a raw blob.

        Args:
            entry_id: Raw entry id.
            blob: Raw page text.

        Returns:
            ExtractionResult; ACCESS_DENIED, NO_NAME or EXTRACTED.
        """
        if self.rules.is_access_denied(blob):
            return ExtractionResult(
                entry_id=entry_id,
                status=ExtractionStatus.ACCESS_DENIED,
                detail="Event page requires login (private or deleted)",
            )

        name = self.extract_name(blob)
        date = extract_date_line(blob)

        if name is None:
            logger.debug("No event name found", entry_id=entry_id)
            return ExtractionResult(
                entry_id=entry_id,
                status=ExtractionStatus.NO_NAME,
                fact=ExtractedFact(id=entry_id, date=date),
                detail="Could not extract event name from raw content",
            )

        return ExtractionResult(
            entry_id=entry_id,
            status=ExtractionStatus.EXTRACTED,
            fact=ExtractedFact(
                id=entry_id,
                name=name,
                date=date,
                normalized_name=normalize_event_name(name),
            ),
        )

    def extract_name(self, blob: str) -> str | None:
        """Find the event title line in a blob.

        Args:
            blob: Raw page text.

        Returns:
            The title line, or None if no line qualifies.
        """
        lines = [line.strip() for line in blob.splitlines()]

        for i, line in enumerate(lines):
            if self.rules.is_chrome(line) or not self.rules.is_title_candidate(line):
                continue
            following = lines[i + 1 : i + 1 + self.rules.lookahead]
            if any(self.rules.confirms_title(nxt) for nxt in following):
                return line

        return None
