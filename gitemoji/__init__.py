"""Emoji suggestions for commit messages."""

# Package exports should be side-effect free.

from . import (
    models,
    normalizer,
    storage,
    indexer,
    scorer,
    cache,
    presentation,
    emit,
)

__all__ = [
    "models",
    "normalizer",
    "storage",
    "indexer",
    "scorer",
    "cache",
    "presentation",
    "emit",
]
