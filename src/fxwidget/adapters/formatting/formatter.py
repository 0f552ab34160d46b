# src/fxwidget/adapters/formatting/formatter.py
"""
Currency Formatter - Display Text for Amounts and Rates

This module turns numbers into the text the converter widget shows:
formatted amounts with symbols, the one-line rate summary, and the fixed
labels used while rates are loading or unavailable. Formatting never raises.

Files that USE this module:
- fxwidget.application.controller (renders ConversionView text)
- tests.test_formatter (unit tests)

Files that this module USES:
- fxwidget.domain.currencies (symbols, fraction digits, symbol position)
- fxwidget.domain.conversion (coerce_amount)
"""
from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from fxwidget.domain.conversion import coerce_amount
from fxwidget.domain.currencies import SUFFIX, get_meta

DEFAULT_FRACTION_DIGITS = 2

LOADING_AMOUNT_TEXT = "Loading..."
LOADING_RATE_TEXT = "Updating rates..."
UNAVAILABLE_AMOUNT_TEXT = "Unavailable"
UNAVAILABLE_RATE_TEXT = "Rates unavailable"
DEGRADED_WARNING_TEXT = "Using offline exchange rates. Some rates may be outdated."
RATES_UPDATED_TEXT = "Exchange rates updated successfully!"


def _number_text(amount: float, digits: int) -> str:
    """
    Round half-up to `digits` places; integers (digits == 0) are grouped.
    """
    pattern = ",f" if digits == 0 else "f"
    try:
        quantum = Decimal(1).scaleb(-digits)
        value = Decimal(repr(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Beyond Decimal precision; float formatting is close enough there
        return format(amount, ",.0f" if digits == 0 else f".{digits}f")
    if value == 0:
        value = abs(value)
    return format(value, pattern)


def format_currency(amount: object, currency: str) -> str:
    """
    Format an amount for display in `currency`.

    Zero-decimal currencies (JPY, KRW, HUF) render as a grouped integer
    ("¥110,500"); the rest render with their configured fraction digits
    ("€85.00"). Unknown codes get 2 digits and no symbol.

    Args:
        amount: Amount to format (non-numeric input counts as 0)
        currency: Currency code

    Returns:
        Display text, never raises
    """
    if isinstance(amount, float) and not math.isfinite(amount):
        return str(amount)
    value = coerce_amount(amount)

    meta = get_meta(currency) if isinstance(currency, str) else None
    if meta is None:
        return _number_text(value, DEFAULT_FRACTION_DIGITS)

    text = _number_text(value, meta.fraction_digits)
    if meta.symbol_position == SUFFIX:
        return f"{text} {meta.symbol}"
    return f"{meta.symbol}{text}"


def format_rate_summary(from_code: str, to_code: str, rate: float) -> str:
    """
    One-line rate summary, e.g. "Rate: 1 USD = €0.85".

    Args:
        from_code: Source currency code
        to_code: Target currency code
        rate: Units of `to_code` per 1 `from_code`
    """
    return f"Rate: 1 {from_code} = {format_currency(rate, to_code)}"


def format_pair_line(from_code: str, to_code: str, rate: float) -> str:
    """Favorite-list line, e.g. "$1.00 = €0.85"."""
    return f"{format_currency(1, from_code)} = {format_currency(rate, to_code)}"
