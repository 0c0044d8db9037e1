"""Build keyword/emoji indexes from one context corpus of the dataset.

Both corpus versions go through :func:`build_index`; they only differ in the
strategy that turns a context entry into the keywords it is indexed under.
``v1`` indexes the literal keywords. ``v2`` also folds in the cover words of
every keyword found in the word table and the normalized ids of the entry's
emoji, so that e.g. ``cfg`` or ``sparkles`` trigger the same emoji as
``configure``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Set

from .models import ContextEntry, Dataset, Emoji, IndexedDataset
from .normalizer import normalize_word
from .storage import DatasetError

logger = logging.getLogger(__name__)

KeywordStrategy = Callable[[ContextEntry, Dataset], List[str]]


def plain_keywords(entry: ContextEntry, dataset: Dataset) -> List[str]:
    """Return the literal keywords of ``entry``."""
    return list(entry.keywords)


def enhanced_keywords(entry: ContextEntry, dataset: Dataset) -> List[str]:
    """Return keywords of ``entry`` plus cover words and emoji ids."""

    result: Dict[str, None] = {}
    for keyword in entry.keywords:
        result[keyword] = None
        word = dataset.lookup_word(keyword)
        if word is not None:
            for cover in word.cover:
                result[cover] = None
    for emoji in entry.emoji:
        result[normalize_word(emoji.id)] = None
    return list(result)


STRATEGIES: Dict[str, KeywordStrategy] = {
    "v1": plain_keywords,
    "v2": enhanced_keywords,
}


def strategy_for(version: str) -> KeywordStrategy:
    try:
        return STRATEGIES[version]
    except KeyError:
        raise ValueError(f"Unknown corpus version: {version!r}") from None


def build_keyword2tag(dataset: Dataset) -> Dict[str, Set[str]]:
    """Map every word and cover word of the word table to its tags."""

    keyword2tag: Dict[str, Set[str]] = {}
    for word in dataset.words.values():
        for member in word.family():
            norm = normalize_word(member)
            if not norm:
                continue
            keyword2tag.setdefault(norm, set()).update(word.tag)
    return keyword2tag


def build_index(
    dataset: Dataset,
    version: str,
    strategy: Optional[KeywordStrategy] = None,
) -> IndexedDataset:
    """Return the :class:`IndexedDataset` of ``version``.

    Raises:
        ValueError: ``version`` has no default strategy.
        DatasetError: the dataset has no corpus ``version`` or a context entry
            refers to an emoji outside the catalog.
    """

    if strategy is None:
        strategy = strategy_for(version)
    if version not in dataset.contexts:
        raise DatasetError(f"Dataset has no context corpus {version!r}")

    started = time.perf_counter()
    catalog = {id(e) for e in dataset.emoji.values()}
    keyword2emoji: Dict[str, Set[Emoji]] = {}
    emoji2keyword: Dict[Emoji, Set[str]] = {e: set() for e in dataset.emoji.values()}

    for position, entry in enumerate(dataset.contexts[version]):
        for emoji in entry.emoji:
            if id(emoji) not in catalog:
                raise DatasetError(
                    f"Context entry {version}[{position}] references emoji "
                    f"{emoji.id!r} outside the catalog"
                )

        normalized: Set[str] = set()
        for keyword in strategy(entry, dataset):
            norm = normalize_word(keyword)
            if not norm:
                logger.debug("Skipping blank keyword in %s[%d]", version, position)
                continue
            normalized.add(norm)

        for keyword in normalized:
            keyword2emoji.setdefault(keyword, set()).update(entry.emoji)
        for emoji in entry.emoji:
            emoji2keyword[emoji].update(normalized)

    index = IndexedDataset(
        version=version,
        keyword2emoji=keyword2emoji,
        emoji2keyword=emoji2keyword,
        keyword2tag=build_keyword2tag(dataset),
    )
    logger.info(
        "Index %s built: %d keywords, %d emoji, %d tagged words in %.1f ms",
        version,
        len(keyword2emoji),
        len(emoji2keyword),
        len(index.keyword2tag),
        (time.perf_counter() - started) * 1000,
    )
    return index
