"""Tests des signaux de similarité."""

import pytest

from certimatch.matching.scorers import (
    CONTAINMENT_A_CONTAINS_B,
    CONTAINMENT_B_CONTAINS_A,
    CONTAINMENT_NONE,
    edit_similarity,
    score,
    token_overlap,
)


def test_score_exact_ignores_separators() -> None:
    sc = score("john doe", "johndoe")
    assert sc.exact is True
    assert sc.similarity == 1.0


def test_score_b_contains_a() -> None:
    sc = score("alice", "alice 2024")
    assert sc.exact is False
    assert sc.containment == CONTAINMENT_B_CONTAINS_A
    assert sc.length_ratio == pytest.approx(5 / 9)


def test_score_a_contains_b() -> None:
    sc = score("mary jane watson", "watson")
    assert sc.containment == CONTAINMENT_A_CONTAINS_B
    assert sc.length_ratio == pytest.approx(6 / 14)


def test_score_short_substring_not_containment() -> None:
    # "al" est trop court pour un containment : fuzzy uniquement
    sc = score("al", "alice")
    assert sc.containment == CONTAINMENT_NONE
    assert sc.length_ratio == 0.0
    assert score("al", "alice", min_containment_length=2).containment == CONTAINMENT_B_CONTAINS_A


def test_score_edit_similarity() -> None:
    sc = score("jon doe", "john doe")
    assert sc.containment == CONTAINMENT_NONE
    assert sc.similarity == pytest.approx(1 - 1 / 7)


def test_score_empty_side() -> None:
    sc = score("", "john")
    assert sc.similarity == 0.0
    assert sc.exact is False
    assert sc.containment == CONTAINMENT_NONE


def test_edit_similarity_bounds() -> None:
    assert edit_similarity("", "") == 1.0
    assert edit_similarity("abc", "abc") == 1.0
    assert edit_similarity("abc", "xyz") == 0.0
    assert edit_similarity("abcd", "abcx") == pytest.approx(0.75)


def test_token_overlap() -> None:
    assert token_overlap("john doe", "doe john") == 1.0
    assert token_overlap("john doe", "john smith") == pytest.approx(1 / 3)
    assert token_overlap("john", "") == 0.0
