"""Zwischenspeicher für aufgebaute Emoji-Indizes.

Der Datensatz ist statisch: jede Korpusversion wird daher höchstens einmal
indiziert und danach unverändert wiederverwendet. Der Cache ist ein
gewöhnliches Objekt, das CLI und Flask-App selbst besitzen. Tests erzeugen
eigene Instanzen oder leeren sie über :meth:`IndexCache.reset`.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional

from .indexer import build_index
from .models import Dataset, IndexedDataset
from .storage import load_default_dataset

logger = logging.getLogger(__name__)


class IndexCache:
    """Build each corpus version once and hand out the same index afterwards."""

    def __init__(self, dataset_loader: Callable[[], Dataset] = load_default_dataset) -> None:
        self._loader = dataset_loader
        self._dataset: Optional[Dataset] = None
        self._indexes: Dict[str, IndexedDataset] = {}
        self._lock = threading.Lock()

    @property
    def dataset(self) -> Dataset:
        dataset = self._dataset
        if dataset is None:
            with self._lock:
                dataset = self._load_locked()
        return dataset

    def _load_locked(self) -> Dataset:
        if self._dataset is None:
            logger.debug("Lade Emoji-Datensatz")
            self._dataset = self._loader()
        return self._dataset

    def get(self, version: str) -> IndexedDataset:
        """Return the index of ``version``, building it on first use."""

        index = self._indexes.get(version)
        if index is not None:
            return index
        with self._lock:
            index = self._indexes.get(version)
            if index is None:
                index = build_index(self._load_locked(), version)
                self._indexes[version] = index
        return index

    def is_built(self, version: str) -> bool:
        return version in self._indexes

    def reset(self, version: Optional[str] = None) -> None:
        """Drop the index of ``version`` or, without argument, everything."""

        with self._lock:
            if version is None:
                self._indexes.clear()
                self._dataset = None
            else:
                self._indexes.pop(version, None)
