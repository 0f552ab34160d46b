# src/fxwidget/adapters/providers/offline.py
"""
Offline Rates - Last-resort Hardcoded Rate Table

A fixed snapshot of USD-based rates used only when every live provider
failed. The values are out of date by construction; conversions served
from them are flagged as degraded.

Files that USE this module:
- fxwidget.application.controller (installs the table in degraded mode)
- tests.* (expected degraded values)

Files that this module USES:
- fxwidget.domain (BASE_CURRENCY, RateMap)
"""
from typing import Dict

from fxwidget.domain.currencies import BASE_CURRENCY
from fxwidget.domain.errors import UnsupportedCurrencyError
from fxwidget.domain.models import RateMap

OFFLINE_PROVIDER_NAME = "offline"

OFFLINE_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.5,
    "INR": 74.5,
    "BDT": 109.5,
    "CAD": 1.25,
    "AUD": 1.35,
    "CHF": 0.92,
    "CNY": 6.45,
    "KRW": 1150.0,
    "BRL": 5.25,
    "RUB": 75.5,
    "ZAR": 14.8,
    "SEK": 8.65,
    "NOK": 8.45,
    "DKK": 6.25,
    "PLN": 3.85,
    "CZK": 21.5,
    "HUF": 305.0,
    "TRY": 8.75,
}


def offline_rates(base: str = BASE_CURRENCY) -> RateMap:
    """
    Return a fresh copy of the offline table expressed relative to `base`.

    Raises:
        UnsupportedCurrencyError: If `base` is not in the table
    """
    if base not in OFFLINE_RATES:
        raise UnsupportedCurrencyError(f"No offline rate for base currency {base}")
    if base == BASE_CURRENCY:
        return dict(OFFLINE_RATES)
    pivot = OFFLINE_RATES[base]
    rebased = {code: rate / pivot for code, rate in OFFLINE_RATES.items()}
    rebased[base] = 1.0
    return rebased
