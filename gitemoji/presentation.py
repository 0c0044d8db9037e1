"""Formatting helpers for showing suggestions and composing messages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

from .models import Emoji, IndexedDataset

PREVIEW_MAX_EMOJI_COUNT = 10


class ConcatStyle(str, Enum):
    EMOJI_FIRST = "emoji-first"
    MESSAGE_FIRST = "message-first"
    SANDWICH = "sandwich"


@dataclass(frozen=True)
class EmojiListing:
    """One row of the "all emoji" list."""

    emoji: Emoji
    label: str
    description: str
    detail: str


def sort_and_join(values: Iterable[str], separator: str = "|") -> str:
    return separator.join(sorted(values))


def concat_emojis(emojis: Iterable[Emoji]) -> str:
    return "".join(e.s for e in emojis)


def combine(emojis: Sequence[Emoji], message: str, style: ConcatStyle | str) -> str:
    """Return ``message`` decorated with ``emojis`` according to ``style``."""

    if not emojis:
        return message
    style = ConcatStyle(style)
    seq = concat_emojis(emojis)
    if style is ConcatStyle.EMOJI_FIRST:
        return f"{seq} {message}"
    if style is ConcatStyle.MESSAGE_FIRST:
        return f"{message} {seq}"
    return f"{seq} {message} {seq}"


def preview_title(emojis: Sequence[Emoji], max_count: int = PREVIEW_MAX_EMOJI_COUNT) -> str:
    """Return the compact preview shown while a message is typed.

    At most ``max_count`` glyphs are shown; the remainder is summarized as
    ``+N``.
    """

    if not emojis:
        return ""
    title = concat_emojis(emojis[:max_count])
    if len(emojis) > max_count:
        title += f" +{len(emojis) - max_count}"
    return title


def list_emojis(index: IndexedDataset, except_: Iterable[Emoji] = ()) -> List[EmojiListing]:
    """Return a listing for every catalog emoji not in ``except_``, by id."""

    skip = set(except_)
    return [
        EmojiListing(
            emoji=emoji,
            label=emoji.s,
            description=f":{emoji.id}:",
            detail=sort_and_join(keywords),
        )
        for emoji, keywords in index.all_emoji()
        if emoji not in skip
    ]
