"""Logic for scoring emoji suggestions for a message."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, Iterable, List, Tuple

from .models import ABBREVIATION, ACRONYM, VERB, Emoji, IndexedDataset
from .normalizer import normalize_word, tokenize

logger = logging.getLogger(__name__)


def _default_tag_weights() -> Dict[str, int]:
    return {VERB: 10, ACRONYM: 20, ABBREVIATION: 20}


@dataclass(frozen=True)
class Weights:
    """Score added per match.

    Attributes:
        substring: Added for every indexed keyword contained in the message.
        whole_word_default: Added for a whole-word match of an untagged word.
        by_tag: Added per tag of a whole-word match; the tag weights of a word
            are summed and replace ``whole_word_default`` when non-zero.
    """

    substring: int = 1
    whole_word_default: int = 5
    by_tag: Dict[str, int] = field(default_factory=_default_tag_weights)

    def for_tags(self, tags: Iterable[str]) -> int:
        return sum(self.by_tag.get(tag, 0) for tag in tags)

    def for_word(self, tags: Iterable[str]) -> int:
        return self.for_tags(tags) or self.whole_word_default


DEFAULT_WEIGHTS = Weights()


def score_message(
    message: str,
    index: IndexedDataset,
    weights: Weights = DEFAULT_WEIGHTS,
) -> List[Tuple[Emoji, int]]:
    """Return ``(emoji, score)`` pairs for ``message``, best first.

    Equal scores are ordered by emoji id so that the result only depends on
    the message and the index content.
    """

    if not isinstance(message, str) or not message.strip():
        return []

    usage: DefaultDict[Emoji, int] = defaultdict(int)

    # Whole-word matching
    for token in tokenize(message):
        normalized = normalize_word(token)
        emojis = index.keyword2emoji.get(normalized)
        if not emojis:
            continue
        weight = weights.for_word(index.keyword2tag.get(normalized, ()))
        for emoji in emojis:
            usage[emoji] += weight

    # Sub-word matching; whole words are counted again here
    lowered = message.lower()
    for keyword, emojis in index.keyword2emoji.items():
        if keyword not in lowered:
            continue
        for emoji in emojis:
            usage[emoji] += weights.substring

    ranked = sorted(usage.items(), key=lambda item: (-item[1], item[0].id))
    logger.debug("Scored %d emoji for %r", len(ranked), message)
    return ranked


def suggest(
    message: str,
    index: IndexedDataset,
    weights: Weights = DEFAULT_WEIGHTS,
) -> List[Emoji]:
    """Return the emoji suggested for ``message``, best first."""

    return [emoji for emoji, _ in score_message(message, index, weights)]
