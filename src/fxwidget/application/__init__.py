"""
Application Layer - Use Cases and Services

This package contains the services that orchestrate domain logic:
the provider fallback chain, the rate cache, the favorites store and the
converter controller.
"""

from fxwidget.application.fetcher import FallbackFetcher
from fxwidget.application.rate_cache import RateCache, now_ms
from fxwidget.application.favorites import FavoritesStore
from fxwidget.application.controller import ConverterController, ConverterView

__all__ = [
    "FallbackFetcher",
    "RateCache",
    "now_ms",
    "FavoritesStore",
    "ConverterController",
    "ConverterView",
]
