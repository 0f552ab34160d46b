# src/fxwidget/domain/errors.py
"""
Domain Errors - Fetch and Conversion Exceptions

This module defines the error taxonomy of the rate engine. Provider adapters
raise one of the FetchError subclasses; the fallback fetcher collects them
and only lets AllProvidersFailedError cross its boundary. Conversion raises
RateUnavailableError when a currency is missing from the current rate map.

Files that USE this module:
- fxwidget.adapters.providers.* (classify provider failures)
- fxwidget.application.* (fetcher, controller, favorites)
- fxwidget.domain.conversion (RateUnavailableError)
- tests.* (assert on error types)

Files that this module USES:
- None (pure domain layer)
"""
from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fxwidget.domain.models import ProviderFailure


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class FetchError(DomainError):
    """Base class for a single provider attempt failing."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class NetworkError(FetchError):
    """Raised when the provider could not be reached (DNS, refused, reset)."""
    pass


class HttpError(FetchError):
    """Raised when the provider answered with an HTTP error status."""

    def __init__(self, status: int, provider: Optional[str] = None):
        super().__init__(f"HTTP {status}", provider)
        self.status = status


class ParseError(FetchError):
    """Raised when the response body is not JSON or has an unrecognized shape."""
    pass


class FetchTimeoutError(FetchError):
    """Raised when an attempt did not settle before its deadline."""
    pass


class AllProvidersFailedError(DomainError):
    """Raised by the fetcher when every configured provider failed."""

    def __init__(self, failures: List["ProviderFailure"]):
        self.failures = list(failures)
        if self.failures:
            detail = "; ".join(f"{f.provider}: {f.error}" for f in self.failures)
        else:
            detail = "no providers configured"
        super().__init__(f"All providers failed ({detail})")


class RateUnavailableError(DomainError):
    """Raised when a conversion needs a rate that the current map does not hold."""

    def __init__(self, currency: str):
        super().__init__(f"No rate available for {currency}")
        self.currency = currency


class UnsupportedCurrencyError(DomainError, ValueError):
    """Raised when a currency code or pair id is malformed or not supported."""
    pass
