"""
Pure helper tests: Jaccard similarity, score bounding, keyword extraction.

Run:
----
    pytest tests/test_utils.py -v
"""

import pytest

from resource_engine.utils import (
    clamp01,
    dominant_factor,
    extract_keywords,
    jaccard_similarity,
    saturate,
    weighted_sum,
)


class TestJaccardSimilarity:
    def test_known_value(self):
        assert jaccard_similarity({1, 2, 3}, {2, 3, 4}) == 0.5

    def test_accepts_any_iterable(self):
        assert jaccard_similarity([1, 2, 2, 3], (2, 3, 4)) == 0.5

    def test_identical_and_disjoint(self):
        assert jaccard_similarity({"a", "b"}, {"a", "b"}) == 1.0
        assert jaccard_similarity({"a"}, {"b"}) == 0.0

    def test_both_empty_is_zero(self):
        assert jaccard_similarity(set(), set()) == 0.0

    def test_symmetric(self):
        a, b = {1, 2, 5, 9}, {2, 9, 10}
        assert jaccard_similarity(a, b) == jaccard_similarity(b, a)


class TestScoreHelpers:
    @pytest.mark.parametrize("value,expected", [(-0.3, 0.0), (0.4, 0.4), (1.7, 1.0)])
    def test_clamp01(self, value, expected):
        assert clamp01(value) == expected

    def test_saturate_caps_at_one(self):
        assert saturate(500, 1000) == 0.5
        assert saturate(25000, 1000) == 1.0

    def test_saturate_non_positive_cap(self):
        assert saturate(10, 0) == 0.0

    def test_weighted_sum_ignores_unweighted_factors(self):
        breakdown = {"a": 1.0, "b": 0.5, "extra": 1.0}
        assert weighted_sum(breakdown, {"a": 0.6, "b": 0.4}) == pytest.approx(0.8)

    def test_dominant_factor_first_wins_ties(self):
        assert dominant_factor({"x": 0.3, "y": 0.7, "z": 0.7}) == "y"


class TestExtractKeywords:
    def test_lowercases_and_strips_punctuation(self):
        assert extract_keywords("Build an MVP: landing-page & waitlist!") == [
            "build", "mvp", "landing", "page", "waitlist",
        ]

    def test_drops_stop_words_and_short_tokens(self):
        assert extract_keywords("It is to be on the go") == []

    def test_deduplicates_in_order(self):
        assert extract_keywords("pricing survey pricing interviews survey") == [
            "pricing", "survey", "interviews",
        ]

    def test_min_length(self):
        assert extract_keywords("market size data", min_length=5) == ["market"]

    def test_empty(self):
        assert extract_keywords("") == []
