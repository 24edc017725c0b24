"""Edit-distance similarity scoring.

Scores are ``(max_len - levenshtein) / max_len`` over already-normalized
strings. No case folding or cleanup happens here; that is the normalizer's
job.
"""

from collections.abc import Iterable
from typing import NamedTuple

from rapidfuzz.distance import Levenshtein


class Match(NamedTuple):
    """Best candidate found by ``best_match``."""

    key: str
    score: float


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance (unit insert/delete/substitute costs).

    Example:
        >>> edit_distance("kitten", "sitting")
        3
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Compute a bounded similarity between two normalized strings.

    Boundary cases: two empty strings are identical (1.0); exactly one empty
    string scores 0.0. Otherwise the result is 1.0 for identical strings and
    strictly between 0 and 1 for different ones. Symmetric.

    Args:
        a: First normalized string.
        b: Second normalized string.

    Returns:
        Similarity in [0, 1].

    Example:
        >>> round(similarity("kitten", "sitting"), 3)
        0.571
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    max_len = max(len(a), len(b))
    return (max_len - edit_distance(a, b)) / max_len


def best_match(
    target: str,
    candidates: Iterable[tuple[str, str]],
    floor: float,
) -> Match | None:
    """Find the candidate most similar to ``target``.

    Candidates are scanned in the order given; a later candidate only wins
    with a strictly higher score, so ties go to the first one. Only scores
    strictly above ``floor`` qualify.

    Args:
        target: Normalized name to match.
        candidates: ``(key, normalized_name)`` pairs in a stable order.
        floor: Exclusive minimum score.

    Returns:
        Best Match, or None if nothing clears the floor.
    """
    best: Match | None = None
    for key, candidate in candidates:
        score = similarity(target, candidate)
        if score > floor and (best is None or score > best.score):
            best = Match(key, score)
    return best
