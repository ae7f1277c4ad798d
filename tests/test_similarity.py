"""
Tests for Text Similarity Module
================================
Similarity metric, normalized equality and lookahead matching.
"""

import pytest

from conftest import text_block, text_blocks
from revision_compare.similarity import (
    LookaheadMatch, find_best_match, normalize_text, similarity, texts_equal
)


class TestSimilarity:
    """Tests for the similarity metric."""

    def test_both_empty(self):
        """Two empty strings are identical."""
        assert similarity("", "") == 1.0

    @pytest.mark.parametrize("a,b", [("", "x"), ("x", "")])
    def test_one_empty(self, a, b):
        """Exactly one empty string scores zero."""
        assert similarity(a, b) == 0.0

    @pytest.mark.parametrize("text", ["a", "Hello world", "The system shall meet all requirements."])
    def test_identical_text(self, text):
        """A non-empty string is fully similar to itself."""
        assert similarity(text, text) == 1.0

    def test_shared_prefix_ratio(self):
        """Equal span length is divided by the longer string length."""
        assert similarity("abcde", "abcdx") == 0.8

    def test_length_mismatch_penalized(self):
        """A strict prefix scores its share of the longer string."""
        assert similarity("abcd", "abcdefgh") == 0.5

    def test_unrelated_text_scores_low(self):
        """Unrelated strings score well below the match threshold."""
        assert similarity("Quarterly revenue", "xyz") < 0.5

    def test_bounds(self):
        """Scores stay within [0, 1]."""
        score = similarity("The quick brown fox", "The quick red fox")
        assert 0.0 <= score <= 1.0


class TestTextsEqual:
    """Tests for the normalized equality check."""

    def test_whitespace_and_case_ignored(self):
        """Trimming, whitespace runs and case do not matter."""
        assert texts_equal("  Hello   World\n", "hello world")

    def test_different_words(self):
        """Different words are not equal."""
        assert not texts_equal("Hello world", "Hello there")

    def test_internal_whitespace_not_removed(self):
        """Whitespace is collapsed, not stripped out."""
        assert not texts_equal("helloworld", "hello world")

    def test_normalize_text(self):
        """Normalization collapses runs to a single space."""
        assert normalize_text("\tA  B\n\nC ") == "a b c"


class TestFindBestMatch:
    """Tests for the lookahead matcher."""

    def test_empty_candidates(self):
        """No candidates gives a zero score and no index."""
        assert find_best_match(text_block("abc"), []) == LookaheadMatch(0.0, None)

    def test_highest_score_wins(self):
        """The most similar candidate is selected."""
        match = find_best_match(text_block("abc"), text_blocks("xyz", "abd", "abc"))
        assert match.index == 2
        assert match.score == 1.0

    def test_ties_keep_first(self):
        """Equal scores keep the lowest index."""
        match = find_best_match(text_block("abc"), text_blocks("abc", "abc"))
        assert match.index == 0

    def test_all_zero_scores(self):
        """Candidates with nothing in common are never selected."""
        match = find_best_match(text_block("abc"), text_blocks("xyz", "uvw"))
        assert match.index is None
        assert match.score == 0.0
