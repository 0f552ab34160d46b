# src/fxwidget/domain/conversion.py
"""
Conversion - Pure Currency Conversion Functions

Converts amounts between two currencies through the base currency of a rate
map. No I/O and no mutation: every function only reads its arguments.

Files that USE this module:
- fxwidget.application.controller (renders conversions from cached rates)
- tests.test_conversion (unit tests)

Files that this module USES:
- fxwidget.domain.errors (RateUnavailableError)
- fxwidget.domain.models (RateMap type)
"""
from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Mapping

from fxwidget.domain.errors import RateUnavailableError

# Leading decimal number, optionally signed, with optional exponent
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def coerce_amount(value: object) -> float:
    """
    Coerce user input to a finite float, falling back to 0.

    Numbers pass through, strings are read up to the first non-numeric
    character ("12.5abc" -> 12.5), everything else becomes 0.

    Args:
        value: Raw amount from the UI

    Returns:
        Finite float amount
    """
    if isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float, Decimal)):
            number = float(value)
        elif isinstance(value, str):
            match = _LEADING_NUMBER.match(value.strip().replace(",", ""))
            number = float(match.group(0)) if match else 0.0
        else:
            return 0.0
    except (OverflowError, ValueError):
        # Integers beyond float range
        return 0.0
    return number if math.isfinite(number) else 0.0


def _rate_for(code: str, rates: Mapping[str, float]) -> float:
    rate = rates.get(code) if rates else None
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise RateUnavailableError(code)
    if not math.isfinite(rate) or rate <= 0:
        raise RateUnavailableError(code)
    return float(rate)


def get_rate(from_code: str, to_code: str, rates: Mapping[str, float]) -> float:
    """
    Cross rate: units of `to_code` per 1 unit of `from_code`.

    Raises:
        RateUnavailableError: If either currency has no positive rate in the map
    """
    from_rate = _rate_for(from_code, rates)
    to_rate = _rate_for(to_code, rates)
    return to_rate / from_rate


def convert(amount: object, from_code: str, to_code: str, rates: Mapping[str, float]) -> float:
    """
    Convert an amount between two currencies through the base currency.

    Args:
        amount: Amount in `from_code` (non-numeric input counts as 0)
        from_code: Source currency code
        to_code: Target currency code
        rates: Rate map relative to the base currency

    Returns:
        Amount expressed in `to_code`

    Raises:
        RateUnavailableError: If either currency has no positive rate in the map
    """
    from_rate = _rate_for(from_code, rates)
    to_rate = _rate_for(to_code, rates)
    value = coerce_amount(amount)
    if from_code == to_code:
        return value
    base_amount = value / from_rate
    return base_amount * to_rate
