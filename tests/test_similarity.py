"""
Unit tests for title similarity scoring.
"""

import pytest

from similarity import is_unique, levenshtein_distance, similarity


class TestLevenshteinDistance:
    """Edit distance between two strings."""

    @pytest.mark.parametrize("a, b, expected", [
        ("", "", 0),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
    ])
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_case_sensitive(self):
        """Upper and lower case letters are different characters."""
        assert levenshtein_distance("Run", "run") == 1


class TestSimilarity:
    """Normalized similarity in [0, 1]."""

    def test_identical_strings(self):
        assert similarity("morning run", "morning run") == 1.0

    def test_empty_strings_are_identical(self):
        assert similarity("", "") == 1.0

    def test_completely_different(self):
        assert similarity("abc", "xyz") == 0.0

    @pytest.mark.parametrize("a, b", [
        ("Morning Run", "Morning Runs"),
        ("Read a book", "Write code"),
        ("", "something"),
    ])
    def test_symmetric(self, a, b):
        """similarity(a, b) == similarity(b, a)."""
        assert similarity(a, b) == similarity(b, a)

    def test_one_extra_letter(self):
        """'morning run' vs 'morning runs': 11/12."""
        assert similarity("morning run", "morning runs") == pytest.approx(11 / 12)


class TestIsUnique:
    """Duplicate detection against already chosen titles."""

    def test_near_duplicate_rejected(self):
        """'Morning Runs' is too close to an existing 'Morning Run'."""
        assert is_unique("Morning Runs", {"morning run"}) is False

    def test_exact_match_after_normalization(self):
        assert is_unique("  MORNING RUN ", {"morning run"}) is False

    def test_distinct_title_accepted(self):
        assert is_unique("Read a chapter", {"morning run", "do 50 push-ups"}) is True

    def test_empty_existing_set(self):
        assert is_unique("Anything", set()) is True

    def test_threshold_is_exclusive(self):
        """A title exactly at the threshold is still unique."""
        # "abcd" vs "abcx": 3/4 = 0.75
        assert is_unique("abcx", {"abcd"}, threshold=0.75) is True
        assert is_unique("abcx", {"abcd"}, threshold=0.7) is False

    def test_custom_threshold(self):
        assert is_unique("Morning Runs", {"morning run"}, threshold=0.95) is True
