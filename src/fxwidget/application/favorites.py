# src/fxwidget/application/favorites.py
"""
Favorites Store - Bounded Most-recently-used Currency Pairs

Keeps up to `capacity` favorite pairs, newest first, without duplicates.
Every mutation is persisted immediately through the key-value store as a
list of "FROM-TO" ids.

Files that USE this module:
- fxwidget.application.controller (toggle/use favorite actions)
- fxwidget.app (builds the store from settings)
- tests.test_favorites (unit tests)

Files that this module USES:
- fxwidget.adapters.persistence.file_store (KeyValueStore protocol)
- fxwidget.domain.models (FavoritePair)
- fxwidget.config (capacity and storage key defaults)
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union

from fxwidget.adapters.persistence.file_store import KeyValueStore
from fxwidget.config import settings
from fxwidget.domain.errors import UnsupportedCurrencyError
from fxwidget.domain.models import FavoritePair

logger = logging.getLogger(__name__)

PairLike = Union[FavoritePair, str]


def _as_pair(pair: PairLike) -> FavoritePair:
    """
    Raises:
        UnsupportedCurrencyError: If the pair is malformed or uses an unsupported code
    """
    return pair.validated() if isinstance(pair, FavoritePair) else FavoritePair.parse(pair)


class FavoritesStore:
    """Ordered, capacity-bounded list of favorite currency pairs."""

    def __init__(self, store: KeyValueStore, key: Optional[str] = None, capacity: Optional[int] = None):
        self.store = store
        self.key = key or settings.favorites_storage_key
        self.capacity = capacity or settings.favorites_capacity
        self._pairs: List[FavoritePair] = []

    def list(self) -> List[FavoritePair]:
        """Favorites, most recently added first."""
        return list(self._pairs)

    def ids(self) -> List[str]:
        return [p.id for p in self._pairs]

    def __len__(self) -> int:
        return len(self._pairs)

    def contains(self, pair: PairLike) -> bool:
        try:
            return _as_pair(pair) in self._pairs
        except UnsupportedCurrencyError:
            return False

    def add(self, pair: PairLike) -> None:
        """
        Insert a pair at the front, or move it there if already present.
        The oldest entry is evicted when the list overflows.
        """
        pair = _as_pair(pair)
        if pair in self._pairs:
            self._pairs.remove(pair)
        self._pairs.insert(0, pair)
        if len(self._pairs) > self.capacity:
            evicted = self._pairs[self.capacity:]
            self._pairs = self._pairs[: self.capacity]
            logger.debug("Favorites full, evicted %s", ", ".join(p.id for p in evicted))
        self._save()

    def remove(self, pair: PairLike) -> bool:
        """Remove a pair. Returns True if it was present."""
        pair = _as_pair(pair)
        if pair not in self._pairs:
            return False
        self._pairs.remove(pair)
        self._save()
        return True

    def toggle(self, pair: PairLike) -> bool:
        """
        Remove the pair if it is a favorite, otherwise add it at the front.

        Returns:
            True if the pair is a favorite after the call
        """
        pair = _as_pair(pair)
        if pair in self._pairs:
            self.remove(pair)
            return False
        self.add(pair)
        return True

    def load(self) -> List[FavoritePair]:
        """
        Load favorites from the store.

        Malformed ids and duplicates are skipped; the list is cut to capacity.
        """
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.error("Failed to load favorites: %s", e)
            raw = None

        pairs: List[FavoritePair] = []
        if isinstance(raw, list):
            for item in raw:
                try:
                    pair = FavoritePair.parse(item)
                except UnsupportedCurrencyError:
                    logger.warning("Skipping malformed favorite %r", item)
                    continue
                if pair not in pairs:
                    pairs.append(pair)
        elif raw is not None:
            logger.warning("Ignoring malformed favorites record under %s", self.key)

        self._pairs = pairs[: self.capacity]
        return self.list()

    def _save(self) -> None:
        try:
            self.store.set(self.key, self.ids())
        except Exception as e:
            logger.error("Failed to save favorites: %s", e)
