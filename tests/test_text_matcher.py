from __future__ import annotations

import pytest

from autofill.text_matcher import (
    FUZZY_MATCH_THRESHOLD,
    is_fuzzy_match,
    normalize,
    search_variants,
    similarity,
)


def test_normalize_strips_case_punctuation_and_diacritics():
    assert normalize("  Adres   E-mail:  ") == "adres email"
    # ł has no decomposition, only combining marks are dropped
    assert normalize("Zażółć Gęślą") == "zazołc gesla"
    assert normalize("Café") == "cafe"
    assert normalize(None) == ""


@pytest.mark.parametrize("text", ["Email", "First Name", "x", "Дата рождения"])
def test_similarity_of_identical_strings_is_100(text):
    assert similarity(text, text) == 100


@pytest.mark.parametrize("a,b", [("kitten", "sitting"), ("Yes", "No"), ("Email", "E-mail address")])
def test_similarity_is_symmetric(a, b):
    assert similarity(a, b) == similarity(b, a)


def test_similarity_edge_values():
    assert similarity("", "abc") == 0
    assert similarity("abc", "") == 0
    # distance 3 over length 7
    assert similarity("kitten", "sitting") == pytest.approx(100 * 4 / 7)


def test_fuzzy_match_rules():
    assert is_fuzzy_match("Yes", "yes")
    assert is_fuzzy_match("Yes, I agree", "yes")
    assert is_fuzzy_match("Colour", "Color")
    assert not is_fuzzy_match("Yes", "No")
    assert not is_fuzzy_match("", "No")


def test_fuzzy_threshold_is_configurable():
    assert FUZZY_MATCH_THRESHOLD == 80
    # "kitten"/"sitting" is ~57% similar
    assert not is_fuzzy_match("kitten", "sitting")
    assert is_fuzzy_match("kitten", "sitting", threshold=50)


def test_search_variants_are_unique_and_non_empty():
    variants = search_variants("yes!")
    assert variants[0] == "yes!"
    assert "YES!" in variants
    assert "Yes!" in variants
    assert "yes" in variants
    assert len(variants) == len(set(variants))
    assert search_variants("") == []
