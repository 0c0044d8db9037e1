import pytest

from gitemoji.normalizer import (
    first_whitespace_after_first_word,
    normalize_word,
    tokenize,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        (" ", ""),
        ("   ", ""),
        (" pre-whitespace", "pre-whitespace"),
        ("post-whitespace ", "post-whitespace"),
        ("  wrapped-by-whitespace  ", "wrapped-by-whitespace"),
        ("mixed-CASEs", "mixed-cases"),
        (" mixed-CASEs-with-whitespace ", "mixed-cases-with-whitespace"),
    ],
)
def test_normalize_word(raw, expected):
    assert normalize_word(raw) == expected


@pytest.mark.parametrize("raw", ["", "  Foo ", "BAR\t", "already-normal", "Ünïcode "])
def test_normalize_word_is_idempotent(raw):
    once = normalize_word(raw)
    assert normalize_word(once) == once


def test_normalize_word_non_string():
    assert normalize_word(None) == ""  # type: ignore[arg-type]


def test_tokenize_drops_punctuation_and_whitespace():
    assert tokenize("fix: crash in CI-pipeline (again)!") == [
        "fix",
        "crash",
        "in",
        "CI",
        "pipeline",
        "again",
    ]


def test_tokenize_keeps_duplicates_and_underscores():
    assert tokenize("a_b a_b 42") == ["a_b", "a_b", "42"]


def test_tokenize_empty():
    assert tokenize("") == []
    assert tokenize("  ...  ") == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", -1),
        (" ", -1),
        ("     ", -1),
        ("  \t ", -1),
        ("something", 9),
        (" something", 10),
        ("\tsomething", 10),
        (" \t something", 12),
        (" something ", 10),
    ],
)
def test_first_whitespace_after_first_word(raw, expected):
    assert first_whitespace_after_first_word(raw) == expected
