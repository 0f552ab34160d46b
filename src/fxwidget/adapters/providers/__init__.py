"""
Provider Adapters - External API Clients

This package contains adapters for external exchange rate APIs.
All providers extend RateProvider. PROVIDER_REGISTRY maps provider names to
adapter classes; build_providers instantiates a chain in priority order.
"""
from typing import Dict, Iterable, List, Optional, Tuple, Type

from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.providers.base import RateProvider, normalize_rates
from fxwidget.adapters.providers.currencylayer import CurrencyLayerProvider
from fxwidget.adapters.providers.exchangerate_api import ExchangeRateApiProvider
from fxwidget.adapters.providers.fixer import FixerProvider
from fxwidget.adapters.providers.offline import OFFLINE_PROVIDER_NAME, OFFLINE_RATES, offline_rates
from fxwidget.adapters.providers.openexchangerates import OpenExchangeRatesProvider
from fxwidget.config import Settings

PROVIDER_REGISTRY: Dict[str, Type[RateProvider]] = {
    ExchangeRateApiProvider.name: ExchangeRateApiProvider,
    FixerProvider.name: FixerProvider,
    OpenExchangeRatesProvider.name: OpenExchangeRatesProvider,
    CurrencyLayerProvider.name: CurrencyLayerProvider,
}

# Provider name -> (constructor argument, Settings field) for its credential
CREDENTIAL_FIELDS: Dict[str, Tuple[str, str]] = {
    ExchangeRateApiProvider.name: ("api_key", "exchangerate_api_key"),
    FixerProvider.name: ("access_key", "fixer_access_key"),
    OpenExchangeRatesProvider.name: ("app_id", "openexchangerates_app_id"),
    CurrencyLayerProvider.name: ("access_key", "currencylayer_access_key"),
}


def build_providers(
    names: Iterable[str],
    client: Optional[HttpClient] = None,
    config: Optional[Settings] = None,
) -> List[RateProvider]:
    """
    Instantiate providers by name, keeping the given order.

    Args:
        names: Provider names in priority order
        client: Shared HttpClient for every provider
        config: Settings to read credentials from (each adapter falls back to the
            global settings when omitted)

    Raises:
        ValueError: If a name is not registered
    """
    client = client or HttpClient()
    providers = []
    for name in names:
        cls = PROVIDER_REGISTRY.get(name)
        if cls is None:
            raise ValueError(f"Unknown rate provider '{name}'")
        kwargs = {}
        if config is not None:
            arg, field = CREDENTIAL_FIELDS[name]
            kwargs[arg] = getattr(config, field)
        providers.append(cls(client=client, **kwargs))
    return providers


__all__ = [
    "RateProvider",
    "normalize_rates",
    "ExchangeRateApiProvider",
    "FixerProvider",
    "OpenExchangeRatesProvider",
    "CurrencyLayerProvider",
    "OFFLINE_PROVIDER_NAME",
    "OFFLINE_RATES",
    "offline_rates",
    "PROVIDER_REGISTRY",
    "build_providers",
]
