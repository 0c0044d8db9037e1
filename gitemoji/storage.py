"""Storage helpers for the emoji dataset.

The loader accepts the JSON layout published by the git-emoji dataset: an
emoji catalog, one context corpus per version and a word table. The catalog
is keyed by each record's ``id``; the JSON property name only serves as a
fallback id for records without one. Emoji ids used
by context entries are resolved against the catalog while loading, so every
other part of the package works with the catalog's :class:`Emoji` objects.
Inconsistent data raises :class:`DatasetError` immediately instead of
producing an index that silently suggests less.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .models import (
    CORPUS_VERSIONS,
    WORD_TAGS,
    ContextEntry,
    Dataset,
    Emoji,
    WordEntry,
)
from .normalizer import normalize_word

logger = logging.getLogger(__name__)

DEFAULT_DATASET_RESOURCE = "dataset.json"


class DatasetError(ValueError):
    """Raised when dataset content violates its consistency rules."""


def _dedupe_preserve_order(items: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        if not item:
            continue
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _string_list(raw: object, what: str) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise DatasetError(f"Invalid {what}: expected a list, got {type(raw).__name__}")
    values: List[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise DatasetError(f"Invalid {what}: {item!r} is not a string")
        values.append(item.strip())
    return _dedupe_preserve_order(values)


def _decode(raw: bytes) -> str:
    for enc in ("utf-8-sig", "utf-16"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        cleaned = "".join(ch for ch in text if ch >= " " or ch in "\n\t\r")
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise DatasetError(f"Dataset is not valid JSON: {exc}") from exc


def _parse_emoji(raw: object) -> Dict[str, Emoji]:
    if isinstance(raw, dict):
        records = list(raw.items())
    elif isinstance(raw, list):
        records = [(None, item) for item in raw]
    else:
        raise DatasetError("Dataset has no emoji catalog")

    catalog: Dict[str, Emoji] = {}
    for key, record in records:
        if not isinstance(record, dict):
            raise DatasetError(f"Invalid emoji record for {key!r}")
        # catalog keys are labels only (upstream uses "_1234"); the record id wins
        emoji_id = str(record.get("id") or key or "").strip()
        glyph = record.get("s")
        if not emoji_id:
            raise DatasetError(f"Emoji record without id: {record!r}")
        if not isinstance(glyph, str) or not glyph:
            raise DatasetError(f"Emoji {emoji_id!r} has no glyph")
        if emoji_id in catalog:
            raise DatasetError(f"Duplicate emoji id: {emoji_id}")
        catalog[emoji_id] = Emoji(emoji_id, glyph)
    return catalog


def _parse_context(raw: object, catalog: Dict[str, Emoji], version: str) -> List[ContextEntry]:
    if not isinstance(raw, list):
        raise DatasetError(f"Context corpus {version} must be a list")

    entries: List[ContextEntry] = []
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            raise DatasetError(f"Invalid context entry {version}[{position}]")
        keywords = _string_list(item.get("keyword"), f"keywords of {version}[{position}]")
        emoji: List[Emoji] = []
        for emoji_id in _string_list(item.get("emoji"), f"emoji of {version}[{position}]"):
            found = catalog.get(emoji_id)
            if found is None:
                raise DatasetError(
                    f"Context entry {version}[{position}] references unknown emoji {emoji_id!r}"
                )
            emoji.append(found)
        entries.append(ContextEntry(keywords=keywords, emoji=emoji))
    return entries


def _parse_words(raw: object) -> Dict[str, WordEntry]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DatasetError("Word table must be an object")

    words: Dict[str, WordEntry] = {}
    for key, value in raw.items():
        norm = normalize_word(key)
        if not norm:
            logger.warning("Ignoring word table entry with empty key")
            continue
        cover: List[str] = []
        tags: List[str] = []
        if isinstance(value, dict):
            cover = _string_list(value.get("cover"), f"cover of {key!r}")
            tags = _string_list(value.get("tag"), f"tags of {key!r}")
        elif value is not None:
            raise DatasetError(f"Invalid word entry for {key!r}")
        for tag in tags:
            if tag not in WORD_TAGS:
                logger.warning("Unknown tag %r on word %r, it will weigh nothing", tag, key)

        existing = words.get(norm)
        if existing is not None:
            existing.cover = _dedupe_preserve_order([*existing.cover, *cover])
            existing.tag.update(tags)
        else:
            words[norm] = WordEntry(key=norm, cover=cover, tag=set(tags))
    return words


def parse_dataset(data: object) -> Dataset:
    """Build a typed :class:`Dataset` from decoded JSON ``data``."""

    if not isinstance(data, dict):
        raise DatasetError(f"Unexpected dataset format: {type(data).__name__}")

    catalog = _parse_emoji(data.get("emoji"))

    raw_context = data.get("context")
    if isinstance(raw_context, list):
        # single-corpus files serve both versions
        raw_context = {version: raw_context for version in CORPUS_VERSIONS}
    if not isinstance(raw_context, dict) or not raw_context:
        raise DatasetError("Dataset has no context corpus")

    contexts = {
        str(version): _parse_context(entries, catalog, str(version))
        for version, entries in raw_context.items()
    }

    dataset = Dataset(emoji=catalog, contexts=contexts, words=_parse_words(data.get("word")))
    validate_dataset(dataset)
    return dataset


def load_dataset(path: str | Path) -> Dataset:
    """Return the dataset stored at ``path``."""

    p = Path(path)
    if not p.exists():
        raise DatasetError(f"Dataset {p} not found")
    text = _decode(p.read_bytes())
    if not text.strip():
        raise DatasetError(f"Dataset {p} is empty")
    dataset = parse_dataset(_parse_json(text))
    logger.info(
        "Datensatz %s geladen: %d Emoji, %d Woerter", p, len(dataset.emoji), len(dataset.words)
    )
    return dataset


def load_default_dataset() -> Dataset:
    """Return the dataset shipped with the package."""

    resource = resources.files("gitemoji").joinpath("data").joinpath(DEFAULT_DATASET_RESOURCE)
    text = _decode(resource.read_bytes())
    return parse_dataset(_parse_json(text))


def validate_dataset(dataset: Dataset) -> None:
    """Raise :class:`DatasetError` if ``dataset`` breaks a consistency rule."""

    by_identity = {id(e) for e in dataset.emoji.values()}
    for key, emoji in dataset.emoji.items():
        if not isinstance(emoji, Emoji):
            raise DatasetError(f"Invalid emoji for {key}")
        if emoji.id != key:
            raise DatasetError(f"Emoji key {key!r} does not match its id {emoji.id!r}")
    for version, entries in dataset.contexts.items():
        for position, entry in enumerate(entries):
            if not isinstance(entry.keywords, list):
                raise DatasetError(f"Invalid keywords in {version}[{position}]")
            for emoji in entry.emoji:
                if id(emoji) not in by_identity:
                    raise DatasetError(
                        f"Context entry {version}[{position}] references emoji "
                        f"{getattr(emoji, 'id', emoji)!r} outside the catalog"
                    )
    for key, word in dataset.words.items():
        if not isinstance(word.cover, list):
            raise DatasetError(f"Invalid cover list for {key}")
        if not isinstance(word.tag, set):
            raise DatasetError(f"Invalid tag set for {key}")


def dataset_stats(dataset: Dataset) -> Dict[str, int]:
    """Return entry counts used by ``gitemoji stats``."""

    stats = {
        "emoji": len(dataset.emoji),
        "words": len(dataset.words),
        "cover": sum(len(w.cover) for w in dataset.words.values()),
    }
    for version in dataset.versions():
        stats[f"context_{version}"] = len(dataset.contexts[version])
    return stats
