"""Extraction of event names and dates from raw page text.

This package provides:
- The TextExtractor capability and its heuristic implementation
- Rule tables describing page chrome and title markers
- Date-line detection
"""

from event_reconciler.extraction.dates import extract_date_line
from event_reconciler.extraction.rules import DEFAULT_RULES, ExtractionRules
from event_reconciler.extraction.text_extractor import (
    ExtractionResult,
    ExtractionStatus,
    HeuristicTextExtractor,
    TextExtractor,
)

__all__ = [
    # Rules
    "DEFAULT_RULES",
    "ExtractionRules",
    # Extraction
    "ExtractionResult",
    "ExtractionStatus",
    "HeuristicTextExtractor",
    "TextExtractor",
    "extract_date_line",
]
