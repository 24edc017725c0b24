"""Tests for the matching module.

This module tests event name normalization and the edit-distance
similarity scorer used to pick replacement links.
"""

from __future__ import annotations

import pytest


class TestNormalizeEventName:
    """Tests for normalize_event_name."""

    def test_strips_trailing_distance(self) -> None:
        """Test that a pipe-separated distance suffix is removed."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("SHERPUR HALF MARATHON 2024 | 21.1k") == (
            "sherpur half marathon 2025"
        )
        assert normalize_event_name("Dhaka Dash 30K") == "dhaka dash"
        assert normalize_event_name("River Run 10km") == "river run"
        assert normalize_event_name("Dhaka Run|10k") == normalize_event_name("Dhaka Run | 10k")
        assert normalize_event_name("Dhaka Run|10k") == "dhaka run"

    def test_replaces_years_with_sentinel(self) -> None:
        """Test that every 4-digit run becomes the sentinel year."""
        from event_reconciler.matching import SENTINEL_YEAR, normalize_event_name

        assert normalize_event_name("Winter Run 2019") == f"winter run {SENTINEL_YEAR}"
        assert normalize_event_name("Winter Run 2019") == normalize_event_name("Winter Run 2026")

    def test_year_needs_exact_four_digits(self) -> None:
        """Test that longer digit runs are not partially rewritten."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("Prize 100000 Race 2019") == "prize 100000 race 2025"

    def test_strips_edition_and_season(self) -> None:
        """Test that edition/season counters and emptied brackets are removed."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("Chuti Resort Ultra 2025 (Season 2) | 50k") == (
            "chuti resort ultra 2025"
        )
        assert normalize_event_name("Edition 3 Night Run") == "night run"

    def test_strips_sponsor_tail(self) -> None:
        """Test that powered-by and sponsored-by tails are removed."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("Dhaka Marathon powered by Acme Corp") == "dhaka marathon"
        assert normalize_event_name("Coastal Ride Sponsored By Foo") == "coastal ride"

    def test_collapses_whitespace(self) -> None:
        """Test that runs of whitespace collapse to a single space."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("  Hill   Trail\tChallenge  ") == "hill trail challenge"

    def test_empty_input(self) -> None:
        """Test that empty and missing names normalize to an empty string."""
        from event_reconciler.matching import normalize_event_name

        assert normalize_event_name("") == ""
        assert normalize_event_name(None) == ""

    @pytest.mark.parametrize(
        "name",
        [
            "SHERPUR HALF MARATHON 2024 | 21.1k",
            "Chuti Resort Ultra 2025 (Season 2) | 50k",
            "Run 5k 10k",
            "Night Run Edition 4 | 21k",
            "Dhaka Marathon powered by Acme | 42km",
        ],
    )
    def test_idempotent(self, name: str) -> None:
        """Test that normalizing twice equals normalizing once."""
        from event_reconciler.matching import normalize_event_name

        once = normalize_event_name(name)
        assert normalize_event_name(once) == once

    def test_names_are_equivalent(self) -> None:
        """Test equivalence after normalization."""
        from event_reconciler.matching import names_are_equivalent

        assert names_are_equivalent("Dhaka Dash 2024 | 30k", "dhaka dash 2025") is True
        assert names_are_equivalent("Dhaka Dash", "Sylhet Sprint") is False


class TestSimilarity:
    """Tests for the similarity scorer."""

    def test_edit_distance(self) -> None:
        """Test unit-cost Levenshtein distance."""
        from event_reconciler.matching import edit_distance

        assert edit_distance("kitten", "sitting") == 3
        assert edit_distance("", "abc") == 3
        assert edit_distance("same", "same") == 0

    def test_identical_strings_score_one(self) -> None:
        """Test that equal strings score exactly 1.0."""
        from event_reconciler.matching import similarity

        assert similarity("dhaka dash", "dhaka dash") == 1.0
        assert similarity("", "") == 1.0

    def test_one_empty_string_scores_zero(self) -> None:
        """Test that exactly one empty string scores 0.0."""
        from event_reconciler.matching import similarity

        assert similarity("", "abc") == 0.0
        assert similarity("abc", "") == 0.0

    def test_known_values(self) -> None:
        """Test scores for known pairs."""
        from event_reconciler.matching import similarity

        assert similarity("kitten", "sitting") == pytest.approx(4 / 7)
        assert similarity("abc", "xyz") < 0.5

    def test_symmetric_and_bounded(self) -> None:
        """Test symmetry and the open interval for different strings."""
        from event_reconciler.matching import similarity

        pairs = [("dhaka dash", "dhaka dash run"), ("night run", "night ride"), ("a", "b")]
        for a, b in pairs:
            assert similarity(a, b) == similarity(b, a)
            assert 0.0 <= similarity(a, b) < 1.0


class TestBestMatch:
    """Tests for best_match."""

    def test_picks_highest_score(self) -> None:
        """Test that the most similar candidate wins."""
        from event_reconciler.matching import best_match

        match = best_match(
            "dhaka dash",
            [("1", "sylhet sprint"), ("2", "dhaka dash"), ("3", "dhaka dush")],
            floor=0.7,
        )

        assert match is not None
        assert match.key == "2"
        assert match.score == 1.0

    def test_floor_is_exclusive(self) -> None:
        """Test that a score equal to the floor does not qualify."""
        from event_reconciler.matching import best_match

        # "abcd" vs "abce" scores exactly 0.75
        assert best_match("abcd", [("1", "abce")], floor=0.75) is None
        assert best_match("abcd", [("1", "abce")], floor=0.7) is not None

    def test_ties_go_to_first_candidate(self) -> None:
        """Test that an equal later score does not replace the first one."""
        from event_reconciler.matching import best_match

        match = best_match("abcd", [("1", "abce"), ("2", "abcf")], floor=0.5)

        assert match is not None
        assert match.key == "1"

    def test_no_candidates(self) -> None:
        """Test that an empty candidate list yields no match."""
        from event_reconciler.matching import best_match

        assert best_match("dhaka dash", [], floor=0.7) is None
