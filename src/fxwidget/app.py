# src/fxwidget/app.py
"""
Composition Root - Wiring the Converter Engine

The engine has no CLI; the widget host calls build_controller() and then
drives the returned controller (start/stop, convert, swap, refresh,
toggle_favorite). Every collaborator can be passed in, so tests and hosts
can swap the store, HTTP client, providers or clock.

Files that USE this module:
- Widget hosts embedding the converter
- tests.test_app (wiring tests)

Files that this module USES:
- fxwidget.config (settings)
- fxwidget.shared.logging_conf (setup_logging)
- fxwidget.adapters.* (HTTP client, providers, JSON file store)
- fxwidget.application.* (fetcher, cache, favorites, controller)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
from typing import Callable, Optional, Sequence  # Type hints

from fxwidget.config import Settings, settings as default_settings
from fxwidget.shared.logging_conf import setup_logging
from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.persistence.file_store import JsonFileStore, KeyValueStore
from fxwidget.adapters.providers import build_providers
from fxwidget.adapters.providers.base import RateProvider
from fxwidget.application.controller import ConverterController, ConverterView
from fxwidget.application.favorites import FavoritesStore
from fxwidget.application.fetcher import FallbackFetcher
from fxwidget.application.rate_cache import RateCache, now_ms

log = logging.getLogger(__name__)


def configure_logging(config: Optional[Settings] = None, level=logging.INFO) -> None:
    """Set up logging from settings (stdout and optional rotating file)."""
    config = config or default_settings
    setup_logging(
        level=level,
        log_file=config.log_file,
        log_dir=config.log_dir,
        max_bytes=config.log_max_bytes,
        backup_count=config.log_backup_count,
        log_to_stdout=config.log_stdout,
    )


def build_fetcher(
    config: Optional[Settings] = None,
    client: Optional[HttpClient] = None,
    providers: Optional[Sequence[RateProvider]] = None,
) -> FallbackFetcher:
    """Build the fallback chain in the configured provider order."""
    config = config or default_settings
    if providers is None:
        client = client or HttpClient(timeout=config.http_timeout_seconds, user_agent=config.user_agent)
        providers = build_providers(config.provider_order, client=client, config=config)
    log.info("Rate provider chain: %s", " -> ".join(p.name for p in providers))
    return FallbackFetcher(providers, attempt_timeout=config.http_timeout_seconds)


def build_controller(
    config: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    view: Optional[ConverterView] = None,
    client: Optional[HttpClient] = None,
    providers: Optional[Sequence[RateProvider]] = None,
    clock: Callable[[], int] = now_ms,
) -> ConverterController:
    """
    Wire a converter controller from settings.

    Args:
        config: Settings to use (defaults to the module-level settings)
        store: Key-value store (defaults to a JsonFileStore at settings.storage_file)
        view: Optional UI collaborator
        client: Optional shared HttpClient for the default providers
        providers: Optional explicit provider chain (overrides settings.provider_order)
        clock: Epoch-milliseconds clock

    Returns:
        A controller that has not been started yet
    """
    config = config or default_settings
    store = store if store is not None else JsonFileStore(config.storage_file)

    cache = RateCache(
        store,
        key=config.rates_storage_key,
        ttl_ms=config.rates_ttl_ms,
        base=config.base_currency,
    )
    favorites = FavoritesStore(
        store,
        key=config.favorites_storage_key,
        capacity=config.favorites_capacity,
    )
    return ConverterController(
        fetcher=build_fetcher(config, client=client, providers=providers),
        cache=cache,
        favorites=favorites,
        view=view,
        clock=clock,
        base=config.base_currency,
        refresh_interval=config.rates_ttl_seconds,
    )
