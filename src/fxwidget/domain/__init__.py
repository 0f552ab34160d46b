# src/fxwidget/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, the currency catalogue, the pure
conversion functions and the error taxonomy.
No dependencies on infrastructure or external systems.
"""

from fxwidget.domain.models import (
    CachedRates,
    ConversionRequest,
    ConversionView,
    ConverterState,
    FavoritePair,
    FetchResult,
    ProviderFailure,
    RateMap,
)
from fxwidget.domain.errors import (
    AllProvidersFailedError,
    DomainError,
    FetchError,
    FetchTimeoutError,
    HttpError,
    NetworkError,
    ParseError,
    RateUnavailableError,
    UnsupportedCurrencyError,
)
from fxwidget.domain.currencies import BASE_CURRENCY, CURRENCIES, CurrencyMeta
from fxwidget.domain.conversion import coerce_amount, convert, get_rate

__all__ = [
    "CachedRates",
    "ConversionRequest",
    "ConversionView",
    "ConverterState",
    "FavoritePair",
    "FetchResult",
    "ProviderFailure",
    "RateMap",
    "AllProvidersFailedError",
    "DomainError",
    "FetchError",
    "FetchTimeoutError",
    "HttpError",
    "NetworkError",
    "ParseError",
    "RateUnavailableError",
    "UnsupportedCurrencyError",
    "BASE_CURRENCY",
    "CURRENCIES",
    "CurrencyMeta",
    "coerce_amount",
    "convert",
    "get_rate",
]
