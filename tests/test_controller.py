"""
Converter Controller Tests - Lifecycle, Degraded Mode, Coalescing, User Actions

Every test drives the controller inside asyncio.run() with fake providers,
an in-memory store and a fake clock.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxwidget.application.controller (ConverterController under test)
- fxwidget.application (FallbackFetcher, RateCache, FavoritesStore)
- tests.conftest (FakeProvider, RecordingView, FakeClock fixtures)
"""
import asyncio  # Drive the controller's async lifecycle
import logging  # Capture refetch failure logs

import pytest  # Testing framework for writing and running tests

from fxwidget.adapters.formatting.formatter import (
    DEGRADED_WARNING_TEXT,
    LOADING_AMOUNT_TEXT,
    LOADING_RATE_TEXT,
    RATES_UPDATED_TEXT,
    UNAVAILABLE_AMOUNT_TEXT,
    UNAVAILABLE_RATE_TEXT,
)
from fxwidget.adapters.providers.offline import OFFLINE_RATES
from fxwidget.application.controller import ConverterController
from fxwidget.application.favorites import FavoritesStore
from fxwidget.application.fetcher import FallbackFetcher
from fxwidget.application.rate_cache import RateCache
from fxwidget.domain.errors import UnsupportedCurrencyError
from fxwidget.domain.models import ConversionRequest, ConverterState, FavoritePair

USD_EUR_RATES = {"USD": 1.0, "EUR": 0.85, "JPY": 110.5, "GBP": 0.73}

RATES_KEY = "fxwidget.rates"
FAVORITES_KEY = "fxwidget.favorites"
HOUR_MS = 3_600_000


def _controller(store, view, clock, providers, attempt_timeout=1, **kwargs):
    fetcher = FallbackFetcher(providers, attempt_timeout=attempt_timeout)
    cache = RateCache(store, key=RATES_KEY, ttl_ms=HOUR_MS)
    favorites = FavoritesStore(store, key=FAVORITES_KEY, capacity=5)
    return ConverterController(fetcher, cache, favorites, view=view, clock=clock, **kwargs)


def _seed(store, clock, rates=None, age_ms=1_000, degraded=False, provider="seed"):
    store.set(RATES_KEY, {
        "rates": dict(rates or USD_EUR_RATES),
        "fetchedAt": clock.now - age_ms,
        "provider": provider,
        "degraded": degraded,
    })


class TestStart:
    def test_fresh_cache_skips_fetch(self, store, view, clock, provider_factory):
        _seed(store, clock)
        provider = provider_factory("p1", {"USD": 1.0, "EUR": 0.5})
        controller = _controller(store, view, clock, [provider])

        async def scenario():
            state = await controller.start()
            await controller.stop()
            return state

        assert asyncio.run(scenario()) == ConverterState.READY
        assert provider.calls == 0
        assert view.last.converted_amount_text == "€0.85"
        assert view.last.rate_summary_text == "Rate: 1 USD = €0.85"
        assert view.last.is_degraded is False

    def test_fresh_degraded_cache_starts_degraded(self, store, view, clock, provider_factory):
        _seed(store, clock, rates=OFFLINE_RATES, degraded=True, provider="offline")
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def scenario():
            state = await controller.start()
            await controller.stop()
            return state

        assert asyncio.run(scenario()) == ConverterState.DEGRADED
        assert controller.is_degraded
        assert view.last.is_degraded is True

    def test_empty_cache_fetches(self, store, view, clock, provider_factory):
        provider = provider_factory("p1", USD_EUR_RATES)
        controller = _controller(store, view, clock, [provider])

        async def scenario():
            state = await controller.start()
            await controller.stop()
            return state

        assert asyncio.run(scenario()) == ConverterState.READY
        assert provider.calls == 1
        assert controller.cache.read().provider == "p1"
        assert controller.cache.read().fetched_at_ms == clock.now
        assert view.notices == [RATES_UPDATED_TEXT]
        assert store.get(RATES_KEY)["provider"] == "p1"

    def test_stale_cache_fetches(self, store, view, clock, provider_factory):
        _seed(store, clock, age_ms=HOUR_MS)
        provider = provider_factory("p1", {"USD": 1.0, "EUR": 0.9})
        controller = _controller(store, view, clock, [provider])

        async def scenario():
            await controller.start()
            await controller.stop()

        asyncio.run(scenario())

        assert provider.calls == 1
        assert view.last.converted_amount_text == "€0.90"

    def test_favorites_are_loaded(self, store, view, clock, provider_factory):
        _seed(store, clock)
        store.set(FAVORITES_KEY, ["USD-JPY", "EUR-GBP"])
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def scenario():
            async with controller:
                return controller.list_favorites()

        assert asyncio.run(scenario()) == [FavoritePair("USD", "JPY"), FavoritePair("EUR", "GBP")]


class TestDegradedMode:
    def test_all_providers_failed_installs_offline_rates(self, store, view, clock, failing):
        controller = _controller(store, view, clock, [failing("p1"), failing("p2")])

        async def scenario():
            state = await controller.start()
            await controller.stop()
            return state

        assert asyncio.run(scenario()) == ConverterState.DEGRADED
        entry = controller.cache.read()
        assert entry.rates == OFFLINE_RATES
        assert entry.degraded is True
        assert entry.fetched_at_ms == clock.now
        assert view.warnings == [DEGRADED_WARNING_TEXT]
        assert view.last.is_degraded is True
        assert view.last.converted_amount_text == "€0.85"
        assert [f.provider for f in controller.fetcher.last_failures] == ["p1", "p2"]

    def test_unexpected_fetcher_error_still_degrades(self, store, view, clock, provider_factory):
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def broken_fetch(base):
            raise RuntimeError("boom")

        controller.fetcher.fetch = broken_fetch

        async def scenario():
            return await controller.refresh(force=True)

        assert asyncio.run(scenario()) == ConverterState.DEGRADED
        assert controller.state == ConverterState.DEGRADED

    def test_manual_refresh_heals(self, store, view, clock, provider_factory, failing):
        provider = failing("p1")
        controller = _controller(store, view, clock, [provider])

        async def scenario():
            await controller.start()
            assert controller.state == ConverterState.DEGRADED
            provider.behavior = {"USD": 1.0, "EUR": 0.9}
            state = await controller.refresh(force=True)
            await controller.stop()
            return state

        assert asyncio.run(scenario()) == ConverterState.READY
        assert controller.is_degraded is False
        assert view.last.is_degraded is False
        assert view.last.converted_amount_text == "€0.90"


class TestRefresh:
    def test_fresh_cache_skips_unforced_refresh(self, store, view, clock, provider_factory):
        _seed(store, clock)
        provider = provider_factory("p1", USD_EUR_RATES)
        controller = _controller(store, view, clock, [provider])

        async def scenario():
            await controller.start()
            await controller.refresh()
            clock.advance(HOUR_MS)
            await controller.refresh()
            await controller.stop()

        asyncio.run(scenario())

        assert provider.calls == 1

    def test_concurrent_refreshes_share_one_fetch(self, store, view, clock, provider_factory):
        _seed(store, clock)
        provider = provider_factory("p1", "slow", rates={"USD": 1.0, "EUR": 0.9})
        controller = _controller(store, view, clock, [provider], attempt_timeout=5)

        async def scenario():
            await controller.start()
            first = asyncio.create_task(controller.refresh(force=True))
            second = asyncio.create_task(controller.refresh(force=True))
            await asyncio.sleep(0)
            assert controller.is_refreshing
            provider.release()
            states = await asyncio.gather(first, second)
            await controller.stop()
            return states

        assert asyncio.run(scenario()) == [ConverterState.READY, ConverterState.READY]
        assert provider.calls == 1
        assert view.notices == [RATES_UPDATED_TEXT]

    def test_stop_cancels_in_flight_refresh(self, store, view, clock, provider_factory):
        _seed(store, clock)
        provider = provider_factory("p1", "hang")
        controller = _controller(store, view, clock, [provider], attempt_timeout=60)

        async def scenario():
            await controller.start()
            task = asyncio.create_task(controller.refresh(force=True))
            await asyncio.sleep(0.01)
            await controller.stop()
            await asyncio.gather(task, return_exceptions=True)

        asyncio.run(scenario())

        assert provider.cancelled
        assert controller.state == ConverterState.READY
        assert controller.is_refreshing is False

    def test_periodic_refresh(self, store, view, clock, provider_factory):
        _seed(store, clock)
        provider = provider_factory("p1", USD_EUR_RATES)
        controller = _controller(store, view, clock, [provider], refresh_interval=0.01)

        async def scenario():
            await controller.start()
            await asyncio.sleep(0.1)
            await controller.stop()

        asyncio.run(scenario())

        assert provider.calls >= 1
        assert controller._periodic_task is None


class TestConversions:
    def _started(self, store, view, clock, provider, rates=None):
        _seed(store, clock, rates=rates)
        return _controller(store, view, clock, [provider])

    def test_convert_request(self, store, view, clock, provider_factory):
        controller = self._started(store, view, clock, provider_factory("p1", USD_EUR_RATES))

        async def scenario():
            async with controller:
                return controller.convert(ConversionRequest(1000, "usd", "jpy"))

        result = asyncio.run(scenario())

        assert result.converted_amount_text == "¥110,500"
        assert result.converted_amount == pytest.approx(110500)
        assert controller.request.to_code == "JPY"

    def test_unknown_currency_loads_then_reports_unavailable(self, store, view, clock, provider_factory):
        provider = provider_factory("p1", USD_EUR_RATES)
        controller = self._started(store, view, clock, provider)

        async def scenario():
            async with controller:
                loading = controller.convert(ConversionRequest(10, "USD", "XYZ"))
                await controller._refetch_task
                return loading

        loading = asyncio.run(scenario())

        assert loading.converted_amount_text == LOADING_AMOUNT_TEXT
        assert loading.rate_summary_text == LOADING_RATE_TEXT
        assert provider.calls == 1
        assert view.last.converted_amount_text == UNAVAILABLE_AMOUNT_TEXT
        assert view.last.rate_summary_text == UNAVAILABLE_RATE_TEXT

    def test_missing_rate_is_fetched_on_demand(self, store, view, clock, provider_factory):
        provider = provider_factory("p1", dict(USD_EUR_RATES, INR=74.5))
        controller = self._started(store, view, clock, provider, rates={"USD": 1.0, "EUR": 0.85})

        async def scenario():
            async with controller:
                controller.convert(ConversionRequest(1, "USD", "INR"))
                await controller._refetch_task

        asyncio.run(scenario())

        assert view.last.converted_amount_text == "₹74.50"

    def test_swap(self, store, view, clock, provider_factory):
        controller = self._started(store, view, clock, provider_factory("p1", USD_EUR_RATES))

        async def scenario():
            async with controller:
                controller.convert(ConversionRequest(85, "USD", "EUR"))
                return controller.swap()

        result = asyncio.run(scenario())

        assert controller.request == ConversionRequest(85, "EUR", "USD")
        assert result.converted_amount_text == "$100.00"
        assert result.rate_summary_text.startswith("Rate: 1 EUR = $1.18")

    def test_bad_amount_renders_zero(self, store, view, clock, provider_factory):
        controller = self._started(store, view, clock, provider_factory("p1", USD_EUR_RATES))

        async def scenario():
            async with controller:
                return controller.convert(ConversionRequest("abc", "USD", "EUR"))

        assert asyncio.run(scenario()).converted_amount_text == "€0.00"

    def test_supported_currencies(self):
        codes = ConverterController.supported_currencies()
        assert codes[0] == "USD"
        assert len(codes) == 21


class TestFavoritesActions:
    def test_toggle_current_pair(self, store, view, clock, provider_factory):
        _seed(store, clock)
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def scenario():
            async with controller:
                assert controller.toggle_favorite() is True
                assert controller.is_favorite()
                assert controller.is_favorite("USD-EUR")
                assert controller.toggle_favorite() is False

        asyncio.run(scenario())

        assert store.get(FAVORITES_KEY) == []

    def test_use_favorite_keeps_amount(self, store, view, clock, provider_factory):
        _seed(store, clock)
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def scenario():
            async with controller:
                controller.convert(ConversionRequest(2, "EUR", "GBP"))
                controller.toggle_favorite("USD-JPY")
                return controller.use_favorite(controller.list_favorites()[0])

        result = asyncio.run(scenario())

        assert controller.request == ConversionRequest(2, "USD", "JPY")
        assert result.converted_amount_text == "¥221"

    def test_favorite_lines_skip_pairs_without_rates(self, store, view, clock, provider_factory):
        _seed(store, clock)
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def scenario():
            async with controller:
                controller.toggle_favorite("USD-INR")
                controller.toggle_favorite("USD-EUR")
                return controller.favorite_lines()

        assert asyncio.run(scenario()) == [(FavoritePair("USD", "EUR"), "$1.00 = €0.85")]

    def test_unsupported_pair_cannot_be_favorited(self, store, view, clock, provider_factory):
        _seed(store, clock)
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])
        controller.request = ConversionRequest(1, "USD", "XYZ")

        with pytest.raises(UnsupportedCurrencyError):
            controller.toggle_favorite()
        assert controller.is_favorite() is False


class TestOnDemandRefetch:
    def test_failed_refetch_is_logged(self, store, view, clock, provider_factory, caplog):
        _seed(store, clock)
        controller = _controller(store, view, clock, [provider_factory("p1", USD_EUR_RATES)])

        async def broken_refresh(force=False):
            raise RuntimeError("render failed")

        async def scenario():
            async with controller:
                controller.refresh = broken_refresh
                controller.convert(ConversionRequest(1, "USD", "XYZ"))
                await asyncio.gather(controller._refetch_task, return_exceptions=True)
                await asyncio.sleep(0)

        with caplog.at_level(logging.ERROR, logger="fxwidget.application.controller"):
            asyncio.run(scenario())

        assert any("On-demand rate fetch failed" in r.getMessage() for r in caplog.records)
