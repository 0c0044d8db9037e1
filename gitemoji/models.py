"""Dataclasses representing the emoji dataset and its derived indexes."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Hashable, List, Mapping, Optional, Set, Tuple

from .normalizer import normalize_word

VERB = "verb"
ACRONYM = "acronym"
ABBREVIATION = "abbreviation"

WORD_TAGS = (VERB, ACRONYM, ABBREVIATION)

CORPUS_VERSIONS = ("v1", "v2")
DEFAULT_CORPUS_VERSION = "v2"


@dataclass(frozen=True, eq=False)
class Emoji:
    """Single emoji of the catalog.

    Emoji compare and hash by identity: the catalog defines each one exactly
    once and every other structure refers to that object.

    Attributes:
        id: Stable identifier without delimiters, e.g. ``rocket``.
        s: Glyph rendered to the user.
    """

    id: str
    s: str

    def __repr__(self) -> str:
        return f"Emoji({self.id!r}, {self.s!r})"


@dataclass
class WordEntry:
    """Vocabulary word with its synonyms (``cover``) and tags."""

    key: str
    cover: List[str] = field(default_factory=list)
    tag: Set[str] = field(default_factory=set)

    def family(self) -> List[str]:
        """Return the word followed by all of its cover words."""
        return [self.key, *self.cover]


@dataclass
class ContextEntry:
    """If any of ``keywords`` appears, all of ``emoji`` are relevant."""

    keywords: List[str] = field(default_factory=list)
    emoji: List[Emoji] = field(default_factory=list)


@dataclass
class Dataset:
    """Static input data: emoji catalog, context corpora and word table.

    ``words`` is keyed by the normalized word so that lookups are
    case-insensitive; use :meth:`lookup_word` rather than indexing directly.
    """

    emoji: Dict[str, Emoji] = field(default_factory=dict)
    contexts: Dict[str, List[ContextEntry]] = field(default_factory=dict)
    words: Dict[str, WordEntry] = field(default_factory=dict)

    def lookup_word(self, word: str) -> Optional[WordEntry]:
        return self.words.get(normalize_word(word))

    def lookup_emoji(self, emoji_id: str) -> Optional[Emoji]:
        return self.emoji.get(emoji_id)

    def versions(self) -> List[str]:
        return sorted(self.contexts)


def _freeze(mapping: Mapping[Hashable, Set]) -> Mapping:
    return MappingProxyType({key: frozenset(values) for key, values in mapping.items()})


@dataclass(frozen=True, eq=False)
class IndexedDataset:
    """Keyword/emoji indexes derived from one context corpus.

    ``keyword2emoji`` and ``emoji2keyword`` are inverse views of the same
    relation. ``keyword2tag`` covers every word of the word table including
    cover words, whether or not a context entry references it. The mappings
    are frozen on construction: read-only views over frozensets.
    """

    version: str
    keyword2emoji: Mapping[str, FrozenSet[Emoji]] = field(default_factory=dict)
    emoji2keyword: Mapping[Emoji, FrozenSet[str]] = field(default_factory=dict)
    keyword2tag: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keyword2emoji", _freeze(self.keyword2emoji))
        object.__setattr__(self, "emoji2keyword", _freeze(self.emoji2keyword))
        object.__setattr__(self, "keyword2tag", _freeze(self.keyword2tag))

    def emoji_for(self, keyword: str) -> FrozenSet[Emoji]:
        return frozenset(self.keyword2emoji.get(normalize_word(keyword), ()))

    def tags_for(self, keyword: str) -> FrozenSet[str]:
        return frozenset(self.keyword2tag.get(normalize_word(keyword), ()))

    def keywords_for(self, emoji: Emoji) -> FrozenSet[str]:
        return frozenset(self.emoji2keyword.get(emoji, ()))

    def all_emoji(self) -> List[Tuple[Emoji, FrozenSet[str]]]:
        """Return every catalog emoji with its keywords, ordered by id."""
        pairs = [(e, frozenset(kw)) for e, kw in self.emoji2keyword.items()]
        pairs.sort(key=lambda pair: pair[0].id)
        return pairs
