"""
Unit tests for the lexical similarity scorer.

Tests cover:
- Normalization and tokenization
- Token pair scoring (exact, containment, near miss)
- Greedy one-to-one alignment
- Edit-ratio fallback when no significant tokens remain
"""

import pytest

from fx_recon.similarity.lexical import (
    LexicalScorer,
    edit_ratio,
    normalize_text,
    token_overlap,
    token_score,
    tokenize,
)


class TestNormalization:
    """Tests for normalize_text and tokenize."""

    def test_normalize_lowercases_and_collapses(self):
        assert normalize_text("  Hello,   WORLD!! ") == "hello world"

    def test_normalize_replaces_punctuation_with_space(self):
        assert normalize_text("ACME-Corp/UK") == "acme corp uk"

    def test_tokenize_drops_stop_words_and_short_words(self):
        assert tokenize("payment to the landlord for rent") == ["landlord", "rent"]

    def test_tokenize_keeps_three_letter_words(self):
        assert tokenize("pmt ab xyz") == ["pmt", "xyz"]


class TestTokenScore:
    """Tests for scoring a single token pair."""

    def test_exact(self):
        assert token_score("amazon", "amazon") == 1.0

    def test_containment(self):
        assert token_score("amazon", "amazonmktp") == pytest.approx(6 / 10 * 0.9)

    def test_near_miss(self):
        assert token_score("invoice", "invoics") == pytest.approx(6 / 7 * 0.7)

    def test_too_different(self):
        assert token_score("abc", "xyz") == 0.0

    def test_distance_must_stay_below_forty_percent(self):
        # distance 2 on a 4 letter token is 50%
        assert token_score("rent", "rank") == 0.0


class TestTokenOverlap:
    """Tests for the greedy alignment."""

    def test_tokens_are_consumed_once(self):
        assert token_overlap(["rent", "rent"], ["rent"]) == pytest.approx(2 / 3)

    def test_no_overlap(self):
        assert token_overlap(["coffee"], ["fuel"]) == 0.0


class TestLexicalScorer:
    """Tests for the full lexical score."""

    @pytest.fixture
    def scorer(self):
        return LexicalScorer()

    def test_identical_strings(self, scorer):
        assert scorer.score("Rent January", "Rent January") == 1.0

    def test_equal_after_normalization(self, scorer):
        assert scorer.score("ACME-Corp.", "acme corp") == 1.0

    def test_empty_strings(self, scorer):
        assert scorer.score("", "") == 1.0
        assert scorer.score("!!", "??") == 1.0

    def test_abbreviated_merchant(self, scorer):
        score = scorer.score("Amazon Marketplace Payment", "AMAZON MKTPLACE PMT")
        assert score > 0.45
        assert score == scorer.score("Amazon Marketplace Payment", "AMAZON MKTPLACE PMT")

    def test_abbreviated_merchant_is_symmetric(self, scorer):
        first = scorer.score("Amazon Marketplace Payment", "AMAZON MKTPLACE PMT")
        second = scorer.score("AMAZON MKTPLACE PMT", "Amazon Marketplace Payment")
        assert first == pytest.approx(second)

    def test_falls_back_to_edit_ratio_without_tokens(self, scorer):
        assert scorer.score("AB 12", "AB 13") == pytest.approx(0.8)

    def test_token_overlap_beats_edit_ratio(self, scorer):
        assert scorer.score("rent rent", "rent") == pytest.approx(2 / 3)

    def test_unrelated_descriptions(self, scorer):
        score = scorer.score("Starbucks Coffee", "Shell Gas Station")
        assert 0.05 < score < 0.45

    @pytest.mark.parametrize(
        "first,second",
        [
            ("Salary", "salary march"),
            ("", "something"),
            ("Uber *Trip", "UBER BV"),
            ("Transfer", "deposit"),
        ],
    )
    def test_score_in_unit_interval(self, scorer, first, second):
        assert 0.0 <= scorer.score(first, second) <= 1.0


class TestEditRatio:
    """Tests for the whole-string edit ratio."""

    def test_both_empty(self):
        assert edit_ratio("", "") == 1.0

    def test_one_empty(self):
        assert edit_ratio("abc", "") == 0.0

    def test_single_substitution(self):
        assert edit_ratio("abcd", "abce") == pytest.approx(0.75)
