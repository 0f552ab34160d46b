# src/fxwidget/application/controller.py
"""
Converter Controller - Orchestration for One Converter Widget

This module wires the fallback fetcher, the rate cache, the favorites store
and the formatting functions together for a single widget instance. It owns
the refresh lifecycle (start/stop, periodic refresh task, coalesced manual
refreshes) and turns user actions into display-ready ConversionView objects
for the UI layer.

State machine: IDLE -> REFRESHING -> READY | DEGRADED, and READY/DEGRADED go
back to REFRESHING on every scheduled or manual refresh. Conversions are
served from whatever rates sit in the cache and never wait for a fetch.

Files that USE this module:
- fxwidget.app (build_controller composition root)
- tests.test_controller (unit tests)

Files that this module USES:
- fxwidget.application.fetcher (FallbackFetcher)
- fxwidget.application.rate_cache (RateCache, now_ms)
- fxwidget.application.favorites (FavoritesStore)
- fxwidget.adapters.providers.offline (offline fallback table)
- fxwidget.adapters.formatting.formatter (display text)
- fxwidget.domain (conversion functions, models, errors)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Tuple

from fxwidget.adapters.formatting.formatter import (
    DEGRADED_WARNING_TEXT,
    LOADING_AMOUNT_TEXT,
    LOADING_RATE_TEXT,
    RATES_UPDATED_TEXT,
    UNAVAILABLE_AMOUNT_TEXT,
    UNAVAILABLE_RATE_TEXT,
    format_currency,
    format_pair_line,
    format_rate_summary,
)
from fxwidget.adapters.providers.offline import OFFLINE_PROVIDER_NAME, offline_rates
from fxwidget.application.favorites import FavoritesStore, PairLike
from fxwidget.application.fetcher import FallbackFetcher
from fxwidget.application.rate_cache import RateCache, now_ms
from fxwidget.domain.conversion import convert, get_rate
from fxwidget.domain.currencies import BASE_CURRENCY, supported_codes
from fxwidget.domain.errors import AllProvidersFailedError, RateUnavailableError
from fxwidget.domain.models import (
    ConversionRequest,
    ConversionView,
    ConverterState,
    FavoritePair,
)

logger = logging.getLogger(__name__)


class ConverterView(Protocol):
    """UI collaborator that receives render results and user-visible messages."""

    def render(self, view: ConversionView) -> None:
        ...

    def warn(self, message: str) -> None:
        ...

    def notify(self, message: str) -> None:
        ...


class ConverterController:
    """Drives one converter widget: refresh lifecycle, conversions, favorites."""

    def __init__(
        self,
        fetcher: FallbackFetcher,
        cache: RateCache,
        favorites: FavoritesStore,
        view: Optional[ConverterView] = None,
        clock: Callable[[], int] = now_ms,
        base: str = BASE_CURRENCY,
        refresh_interval: Optional[float] = None,
        initial_request: Optional[ConversionRequest] = None,
    ):
        """
        Initialize controller. Nothing is loaded or fetched until start().

        Args:
            fetcher: Provider chain used for refreshes
            cache: Rate cache (also the source for every conversion)
            favorites: Favorite pairs store
            view: Optional UI collaborator
            clock: Returns the current time in epoch milliseconds
            base: Base currency requested from providers
            refresh_interval: Seconds between scheduled refreshes (defaults to the cache TTL)
            initial_request: Request rendered before the user changes anything (1 USD -> EUR)
        """
        self.fetcher = fetcher
        self.cache = cache
        self.favorites = favorites
        self.view = view
        self.clock = clock
        self.base = base
        self.refresh_interval = refresh_interval or cache.ttl_ms / 1000.0
        self.state = ConverterState.IDLE
        self.request = initial_request or ConversionRequest(1, "USD", "EUR")
        self.last_view: Optional[ConversionView] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._periodic_task: Optional[asyncio.Task] = None
        self._refetch_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> ConverterState:
        """
        Load persisted rates and favorites, refresh if needed, and start the
        periodic refresh task.

        Returns:
            State after start-up (READY or DEGRADED)
        """
        self.favorites.load()
        entry = self.cache.load()

        if entry is not None and not self.cache.is_stale(self.clock()):
            self.state = ConverterState.DEGRADED if entry.degraded else ConverterState.READY
            logger.info("Using cached rates from %s, state=%s", entry.provider, self.state.value)
            self._render()
        else:
            await self.refresh(force=True)

        if self._periodic_task is None or self._periodic_task.done():
            self._periodic_task = asyncio.create_task(self._periodic_refresh())
        return self.state

    async def stop(self) -> None:
        """Cancel the periodic task and any in-flight refresh."""
        tasks = [
            t for t in (self._periodic_task, self._refresh_task, self._refetch_task)
            if t is not None and not t.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._periodic_task = None
        self._refresh_task = None
        self._refetch_task = None
        logger.info("Converter controller stopped")

    async def __aenter__(self) -> ConverterController:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _periodic_refresh(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            try:
                await self.refresh(force=True)
            except Exception as e:
                logger.warning("Periodic rate update failed: %s", e)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    @property
    def is_degraded(self) -> bool:
        entry = self.cache.read()
        return entry is not None and entry.degraded

    async def refresh(self, force: bool = False) -> ConverterState:
        """
        Refresh rates through the fetcher.

        Without `force`, a fresh cache makes this a no-op. A call made while
        another refresh is running joins that refresh instead of starting a
        second fetch.

        Returns:
            State after the refresh
        """
        if self.is_refreshing:
            logger.debug("Refresh already in flight, joining it")
            return await asyncio.shield(self._refresh_task)

        if not force and not self.cache.is_stale(self.clock()):
            logger.debug("Cached rates still fresh, skipping refresh")
            return self.state

        self._refresh_task = asyncio.create_task(self._run_refresh())
        return await asyncio.shield(self._refresh_task)

    async def _run_refresh(self) -> ConverterState:
        previous = self.state
        self.state = ConverterState.REFRESHING
        try:
            result = await self.fetcher.fetch(self.base)
        except AllProvidersFailedError as e:
            logger.warning("All exchange rate providers failed, using offline rates: %s", e)
            self._install_offline_rates()
        except asyncio.CancelledError:
            self.state = previous
            raise
        except Exception as e:
            logger.error("Rate refresh failed unexpectedly, using offline rates: %s", e, exc_info=True)
            self._install_offline_rates()
        else:
            self.cache.write(result.rates, self.clock(), provider=result.provider)
            self.state = ConverterState.READY
            self._notify(RATES_UPDATED_TEXT)

        self._render(allow_refetch=False)
        return self.state

    def _install_offline_rates(self) -> None:
        self.cache.write(
            offline_rates(self.base),
            self.clock(),
            provider=OFFLINE_PROVIDER_NAME,
            degraded=True,
        )
        self.state = ConverterState.DEGRADED
        self._warn(DEGRADED_WARNING_TEXT)

    def _schedule_refetch(self) -> None:
        if self.is_refreshing:
            # The running refresh re-renders when it completes
            return
        if self._refetch_task is not None and not self._refetch_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, on-demand rate fetch skipped")
            return
        self._refetch_task = loop.create_task(self.refresh(force=True))
        self._refetch_task.add_done_callback(self._log_refetch_failure)

    @staticmethod
    def _log_refetch_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("On-demand rate fetch failed: %s", error, exc_info=error)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def convert(self, request: Optional[ConversionRequest] = None) -> ConversionView:
        """
        Convert the given request (or re-render the current one) from cached rates.

        Never waits for a fetch. If a rate is missing, a loading view is
        returned and an on-demand refresh is scheduled.
        """
        if request is not None:
            self.request = request
        return self._render()

    def swap(self) -> ConversionView:
        """Swap source and target currencies and re-render."""
        req = self.request
        self.request = ConversionRequest(req.amount, req.to_code, req.from_code)
        return self._render()

    def toggle_favorite(self, pair: Optional[PairLike] = None) -> bool:
        """
        Toggle a pair (default: the current pair) in the favorites list.

        Returns:
            True if the pair is a favorite afterwards
        """
        return self.favorites.toggle(pair if pair is not None else self.request.pair)

    def is_favorite(self, pair: Optional[PairLike] = None) -> bool:
        return self.favorites.contains(pair if pair is not None else self.request.pair)

    def use_favorite(self, pair: PairLike) -> ConversionView:
        """Switch the current request to a favorite pair, keeping the amount."""
        if not isinstance(pair, FavoritePair):
            pair = FavoritePair.parse(pair)
        self.request = ConversionRequest(self.request.amount, pair.from_code, pair.to_code)
        return self._render()

    def list_favorites(self) -> List[FavoritePair]:
        return self.favorites.list()

    def favorite_lines(self) -> List[Tuple[FavoritePair, str]]:
        """
        Favorites paired with a display line such as "$1.00 = €0.85".

        Pairs whose rate is not in the cached map are left out.
        """
        rates = self.cache.rates
        if rates is None:
            return []
        lines = []
        for pair in self.favorites.list():
            try:
                rate = get_rate(pair.from_code, pair.to_code, rates)
            except RateUnavailableError:
                logger.debug("No rate for favorite %s, skipped", pair.id)
                continue
            lines.append((pair, format_pair_line(pair.from_code, pair.to_code, rate)))
        return lines

    @staticmethod
    def supported_currencies() -> List[str]:
        return supported_codes()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, allow_refetch: bool = True) -> ConversionView:
        req = self.request
        rates = self.cache.rates
        degraded = self.is_degraded

        try:
            if rates is None:
                raise RateUnavailableError(req.from_code)
            value = convert(req.amount, req.from_code, req.to_code, rates)
            rate = get_rate(req.from_code, req.to_code, rates)
        except RateUnavailableError as e:
            if allow_refetch:
                logger.info("Rate for %s unavailable, fetching on demand", e.currency)
                view = ConversionView(LOADING_AMOUNT_TEXT, LOADING_RATE_TEXT, degraded)
                self._schedule_refetch()
            else:
                logger.warning("Rate for %s still unavailable after refresh", e.currency)
                view = ConversionView(UNAVAILABLE_AMOUNT_TEXT, UNAVAILABLE_RATE_TEXT, degraded)
        else:
            view = ConversionView(
                converted_amount_text=format_currency(value, req.to_code),
                rate_summary_text=format_rate_summary(req.from_code, req.to_code, rate),
                is_degraded=degraded,
                converted_amount=value,
            )

        self.last_view = view
        if self.view is not None:
            self.view.render(view)
        return view

    def _warn(self, message: str) -> None:
        if self.view is not None:
            self.view.warn(message)

    def _notify(self, message: str) -> None:
        if self.view is not None:
            self.view.notify(message)
