"""Name normalization and similarity scoring.

This package provides:
- Event name normalization (decorative tokens, years, sponsor tails)
- Levenshtein-based similarity and best-candidate search
"""

from event_reconciler.matching.normalizer import (
    SENTINEL_YEAR,
    names_are_equivalent,
    normalize_event_name,
)
from event_reconciler.matching.similarity import (
    Match,
    best_match,
    edit_distance,
    similarity,
)

__all__ = [
    # Normalization
    "SENTINEL_YEAR",
    "names_are_equivalent",
    "normalize_event_name",
    # Similarity
    "Match",
    "best_match",
    "edit_distance",
    "similarity",
]
