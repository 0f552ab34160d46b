# src/fxwidget/application/fetcher.py
"""
Fallback Fetcher - Ordered Provider Chain with Per-attempt Deadline

Tries rate providers strictly one after another in priority order. Each
attempt runs under a fixed deadline; an attempt that does not settle in time
is cancelled and counted as a FetchTimeoutError for that provider. The first
provider that returns a valid rate map wins and no later provider is called.
When every provider fails, AllProvidersFailedError carries the
provider-tagged failures; the caller decides what to serve instead.

Files that USE this module:
- fxwidget.application.controller (ConverterController refreshes through the fetcher)
- fxwidget.app (builds the default chain)
- tests.test_fetcher (unit tests)

Files that this module USES:
- fxwidget.adapters.providers.base (RateProvider)
- fxwidget.domain (errors, FetchResult, ProviderFailure)
- fxwidget.config (default attempt timeout)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from fxwidget.adapters.providers.base import RateProvider
from fxwidget.config import settings
from fxwidget.domain.currencies import BASE_CURRENCY
from fxwidget.domain.errors import (
    AllProvidersFailedError,
    FetchError,
    FetchTimeoutError,
    ParseError,
)
from fxwidget.domain.models import FetchResult, ProviderFailure

log = logging.getLogger(__name__)


class FallbackFetcher:
    """
    Provider chain that tries each provider in order until one succeeds.
    Tracks the failures of the most recent run for diagnostics.
    """

    def __init__(self, providers: Sequence[RateProvider], attempt_timeout: Optional[float] = None):
        """
        Initialize fetcher.

        Args:
            providers: Providers in priority order (first = preferred)
            attempt_timeout: Seconds each attempt may take (defaults to settings.http_timeout_seconds)
        """
        self.providers = list(providers)
        self.attempt_timeout = attempt_timeout or settings.http_timeout_seconds
        self.last_failures: List[ProviderFailure] = []
        self.last_used_provider: Optional[str] = None

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]

    async def _attempt(self, provider: RateProvider, base: str):
        try:
            return await asyncio.wait_for(provider.fetch(base), timeout=self.attempt_timeout)
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(
                f"{provider.name} did not answer within {self.attempt_timeout}s", provider.name
            ) from e

    async def fetch(self, base: str = BASE_CURRENCY) -> FetchResult:
        """
        Fetch rates from the first provider that answers with a valid map.

        Args:
            base: Base currency the rates should be expressed in

        Returns:
            FetchResult with the normalized map and the provider name

        Raises:
            AllProvidersFailedError: If every provider failed (or none is configured)
        """
        failures: List[ProviderFailure] = []

        for provider in self.providers:
            try:
                log.info("Fetching rates from %s (base=%s)", provider.name, base)
                rates = await self._attempt(provider, base)
                if not rates or rates.get(base) != 1.0:
                    raise ParseError(f"{provider.name} returned a map without base {base}", provider.name)
            except FetchError as e:
                if e.provider is None:
                    e.provider = provider.name
                log.warning("Provider %s failed (%s): %s", provider.name, type(e).__name__, e)
                failures.append(ProviderFailure(provider.name, e))
                continue
            except Exception as e:
                log.warning("Provider %s raised unexpectedly: %s", provider.name, e, exc_info=True)
                error = FetchError(f"{provider.name} raised {type(e).__name__}: {e}", provider.name)
                error.__cause__ = e
                failures.append(ProviderFailure(provider.name, error))
                continue

            self.last_failures = failures
            self.last_used_provider = provider.name
            log.info("Rates updated from %s (%d currencies)", provider.name, len(rates))
            return FetchResult(rates=rates, provider=provider.name)

        self.last_failures = failures
        self.last_used_provider = None
        log.error("All %d rate providers failed", len(self.providers))
        raise AllProvidersFailedError(failures)
