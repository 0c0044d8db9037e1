"""Helpers to normalize words and split messages before matching."""

from __future__ import annotations

import re
from typing import List

_WORD_RE = re.compile(r"\w+")
_FIRST_NON_WHITESPACE_SEQUENCE = re.compile(r"^\s*\S+")


def normalize_word(word: str) -> str:
    """Return the representation of ``word`` used as index key."""

    if not isinstance(word, str):
        return ""

    return word.strip().lower()


def tokenize(message: str) -> List[str]:
    """Split ``message`` into runs of word characters.

    Punctuation and whitespace only separate words and never end up in the
    result. Duplicates are kept in message order.
    """

    if not isinstance(message, str):
        return []
    return [token for token in _WORD_RE.findall(message) if token]


def first_whitespace_after_first_word(s: str) -> int:
    """Return the index of the whitespace following the first word, or -1."""

    match = _FIRST_NON_WHITESPACE_SEQUENCE.match(s)
    if not match:
        return -1
    return match.end()
