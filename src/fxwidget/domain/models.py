# src/fxwidget/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Rate maps and cached rate entries
- Provider attribution for fetch results and failures
- Favorite currency pairs and conversion requests
- The converter's view model and state

Files that USE this module:
- fxwidget.application.* (all services use domain models)
- fxwidget.adapters.* (adapters create and use domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- fxwidget.domain.errors (UnsupportedCurrencyError for pair parsing)
- fxwidget.domain.currencies (supported codes for favorite pairs)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorators for creating data classes
from enum import Enum  # Converter state enumeration
from typing import Dict, Optional  # Type hints for mappings and optional values

from fxwidget.domain.currencies import is_supported
from fxwidget.domain.errors import FetchError, UnsupportedCurrencyError

# Currency code -> units of that currency per 1 unit of the base currency
RateMap = Dict[str, float]


@dataclass(frozen=True)
class CachedRates:
    """
    Last normalized rate map together with the time it was fetched.

    Attributes:
        rates: Rate map relative to the base currency
        fetched_at_ms: Epoch milliseconds of the fetch that produced the map
        provider: Name of the provider that produced the map ("offline" for the fallback table)
        degraded: True when the map is the hardcoded offline table
    """
    rates: RateMap
    fetched_at_ms: int
    provider: Optional[str] = None
    degraded: bool = False


@dataclass(frozen=True)
class FetchResult:
    """A successful fetch: the normalized map and the provider that served it."""
    rates: RateMap
    provider: str


@dataclass(frozen=True)
class ProviderFailure:
    """One failed provider attempt, kept for diagnostics."""
    provider: str
    error: FetchError


@dataclass(frozen=True)
class FavoritePair:
    """
    A favorite currency pair, identified by the canonical id "FROM-TO".
    """
    from_code: str
    to_code: str

    @property
    def id(self) -> str:
        return f"{self.from_code}-{self.to_code}"

    @classmethod
    def parse(cls, pair_id: str) -> FavoritePair:
        """
        Parse a canonical "FROM-TO" id.

        Raises:
            UnsupportedCurrencyError: If the id is not two supported codes joined by '-'
        """
        if not isinstance(pair_id, str):
            raise UnsupportedCurrencyError(f"Invalid pair id: {pair_id!r}")
        parts = pair_id.strip().upper().split("-")
        if len(parts) != 2 or not all(len(p) == 3 and p.isalpha() for p in parts):
            raise UnsupportedCurrencyError(f"Invalid pair id: {pair_id!r}")
        return cls(parts[0], parts[1]).validated()

    def validated(self) -> FavoritePair:
        """
        Return self if both codes are supported.

        Raises:
            UnsupportedCurrencyError: If either code is not supported
        """
        for code in (self.from_code, self.to_code):
            if not is_supported(code):
                raise UnsupportedCurrencyError(f"Unsupported currency in pair {self.id}: {code}")
        return self

    def swapped(self) -> FavoritePair:
        return FavoritePair(self.to_code, self.from_code)

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class ConversionRequest:
    """An amount to convert from one currency to another. Not stored."""
    amount: object
    from_code: str
    to_code: str

    def __post_init__(self):
        object.__setattr__(self, "from_code", str(self.from_code).strip().upper())
        object.__setattr__(self, "to_code", str(self.to_code).strip().upper())

    @property
    def pair(self) -> FavoritePair:
        return FavoritePair(self.from_code, self.to_code)


@dataclass(frozen=True)
class ConversionView:
    """
    Display-ready result handed to the UI after every render cycle.

    Attributes:
        converted_amount_text: Formatted converted amount (or a loading/unavailable label)
        rate_summary_text: One-line rate summary, e.g. "Rate: 1 USD = €0.85"
        is_degraded: True while conversions are served from offline rates
    """
    converted_amount_text: str
    rate_summary_text: str
    is_degraded: bool = False
    converted_amount: Optional[float] = field(default=None, compare=False)


class ConverterState(str, Enum):
    """Lifecycle state of a converter controller."""
    IDLE = "idle"
    REFRESHING = "refreshing"
    READY = "ready"
    DEGRADED = "degraded"
