# src/fxwidget/application/rate_cache.py
"""
Rate Cache - Last Fetched Rates with Time-to-live

This module holds the last successfully normalized rate map together with
its fetch timestamp, persists it through the key-value store, and answers
freshness questions. Entries are immutable CachedRates objects, so rates and
timestamp are always replaced together.

Files that USE this module:
- fxwidget.application.controller (reads rates for conversions, writes after fetches)
- fxwidget.app (builds the cache from settings)
- tests.test_rate_cache (unit tests)

Files that this module USES:
- fxwidget.adapters.persistence.file_store (KeyValueStore protocol)
- fxwidget.domain (CachedRates, currency catalogue)
- fxwidget.shared.validators (validate_rate_value)
- fxwidget.config (TTL and storage key defaults)
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fxwidget.adapters.persistence.file_store import KeyValueStore
from fxwidget.config import settings
from fxwidget.domain.currencies import BASE_CURRENCY, is_supported
from fxwidget.domain.models import CachedRates, RateMap
from fxwidget.shared.validators import validate_rate_value

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 60 * 60 * 1000  # 1 hour


def now_ms() -> int:
    """Current UTC time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class RateCache:
    """Holds the current CachedRates entry and mirrors it to persistent storage."""

    def __init__(
        self,
        store: KeyValueStore,
        key: Optional[str] = None,
        ttl_ms: Optional[int] = None,
        base: str = BASE_CURRENCY,
    ):
        """
        Initialize rate cache. Nothing is read until load() is called.

        Args:
            store: Persistent key-value collaborator
            key: Storage key (defaults to settings.rates_storage_key)
            ttl_ms: Time-to-live in milliseconds (defaults to settings.rates_ttl_ms)
            base: Base currency every cached map must be expressed in
        """
        self.store = store
        self.key = key or settings.rates_storage_key
        self.ttl_ms = ttl_ms if ttl_ms is not None else settings.rates_ttl_ms
        self.base = base
        self._entry: Optional[CachedRates] = None

    def read(self) -> Optional[CachedRates]:
        """
        Get the current entry.

        Returns:
            Current CachedRates if available, None otherwise
        """
        return self._entry

    @property
    def rates(self) -> Optional[RateMap]:
        return self._entry.rates if self._entry else None

    def has_rates(self) -> bool:
        return self._entry is not None

    def age_ms(self, now: int) -> Optional[int]:
        """Milliseconds since the entry was fetched, or None when empty."""
        if self._entry is None:
            return None
        return now - self._entry.fetched_at_ms

    def is_stale(self, now: int) -> bool:
        """
        Check whether the entry is due for a refresh.

        Returns:
            True when no entry exists or `now - fetched_at >= ttl`, False otherwise
        """
        if self._entry is None:
            return True
        return now - self._entry.fetched_at_ms >= self.ttl_ms

    def write(
        self,
        rates: RateMap,
        now: int,
        provider: Optional[str] = None,
        degraded: bool = False,
    ) -> CachedRates:
        """
        Replace the entry with a new map and timestamp, then persist it.

        The in-memory entry is updated even if the disk write fails.

        Args:
            rates: Full rate map (replaces the previous map, never merged)
            now: Fetch time in epoch milliseconds
            provider: Name of the provider that produced the map
            degraded: True when the map is the offline fallback table

        Returns:
            The new CachedRates entry
        """
        entry = CachedRates(
            rates=dict(rates),
            fetched_at_ms=int(now),
            provider=provider,
            degraded=degraded,
        )
        self._entry = entry
        self.persist()
        return entry

    def persist(self) -> None:
        """Write the current entry to the store; failures are logged, not raised."""
        if self._entry is None:
            return
        try:
            self.store.set(self.key, self._to_record(self._entry))
            logger.debug("Rates persisted under %s (fetchedAt=%s)", self.key, self._entry.fetched_at_ms)
        except Exception as e:
            logger.error("Failed to persist rates: %s", e)

    def load(self) -> Optional[CachedRates]:
        """
        Load the entry from the store, validating its shape.

        Malformed records are logged and ignored; the cache then stays empty.

        Returns:
            Loaded CachedRates, or None if nothing valid was stored
        """
        try:
            record = self.store.get(self.key)
        except Exception as e:
            logger.error("Failed to load rates from store: %s", e)
            return None

        if record is None:
            logger.info("No persisted rates found")
            return None

        entry = self._from_record(record)
        if entry is None:
            logger.warning("Ignoring malformed persisted rates under %s", self.key)
            return None

        self._entry = entry
        logger.info("Loaded persisted rates from %s (fetchedAt=%s)", entry.provider or "unknown", entry.fetched_at_ms)
        return entry

    def reset(self) -> None:
        """Drop the entry from memory and storage."""
        self._entry = None
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.error("Failed to delete persisted rates: %s", e)

    @staticmethod
    def _to_record(entry: CachedRates) -> Dict[str, Any]:
        return {
            "rates": entry.rates,
            "fetchedAt": entry.fetched_at_ms,
            "provider": entry.provider,
            "degraded": entry.degraded,
        }

    def _from_record(self, record: Any) -> Optional[CachedRates]:
        if not isinstance(record, dict):
            return None

        fetched_at = record.get("fetchedAt")
        if isinstance(fetched_at, bool) or not isinstance(fetched_at, (int, float)):
            return None
        if not math.isfinite(fetched_at) or fetched_at < 0:
            return None

        raw_rates = record.get("rates")
        if not isinstance(raw_rates, dict):
            return None

        rates: Dict[str, float] = {}
        for code, value in raw_rates.items():
            if not is_supported(code):
                continue
            if not validate_rate_value(value):
                return None
            rates[code] = float(value)

        if rates.get(self.base) != 1.0 or len(rates) < 2:
            return None

        provider = record.get("provider")
        return CachedRates(
            rates=rates,
            fetched_at_ms=int(fetched_at),
            provider=provider if isinstance(provider, str) else None,
            degraded=record.get("degraded") is True,
        )
