# src/fxwidget/domain/currencies.py
"""
Currency Catalogue - Supported Currencies and Display Metadata

Static configuration defined once at import time. Every rate map and every
conversion is restricted to the codes listed here.

Files that USE this module:
- fxwidget.adapters.providers.base (filters provider tables to supported codes)
- fxwidget.adapters.formatting.formatter (symbols and fraction digits)
- fxwidget.application.* (code validation)
- fxwidget.shared.validators (validate_currency_code)

Files that this module USES:
- None (pure domain layer)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

BASE_CURRENCY = "USD"

PREFIX = "prefix"
SUFFIX = "suffix"

# Rendered without a fractional part
ZERO_DECIMAL_CODES = frozenset({"JPY", "KRW", "HUF"})


@dataclass(frozen=True)
class CurrencyMeta:
    """
    Display metadata for one currency.

    Attributes:
        code: ISO 4217 code (uppercase, 3 letters)
        name: Human readable name
        symbol: Display symbol
        fraction_digits: Digits shown after the decimal point
        symbol_position: "prefix" ("$1.00") or "suffix" ("1.00 kr")
    """
    code: str
    name: str
    symbol: str
    fraction_digits: int = 2
    symbol_position: str = PREFIX


def _meta(code: str, name: str, symbol: str, symbol_position: str = PREFIX) -> CurrencyMeta:
    digits = 0 if code in ZERO_DECIMAL_CODES else 2
    return CurrencyMeta(code, name, symbol, digits, symbol_position)


CURRENCIES: Dict[str, CurrencyMeta] = {
    m.code: m
    for m in (
        _meta("USD", "US Dollar", "$"),
        _meta("EUR", "Euro", "€"),
        _meta("GBP", "British Pound", "£"),
        _meta("JPY", "Japanese Yen", "¥"),
        _meta("INR", "Indian Rupee", "₹"),
        _meta("BDT", "Bangladeshi Taka", "৳"),
        _meta("CAD", "Canadian Dollar", "C$"),
        _meta("AUD", "Australian Dollar", "A$"),
        _meta("CHF", "Swiss Franc", "CHF"),
        _meta("CNY", "Chinese Yuan", "¥"),
        _meta("KRW", "South Korean Won", "₩"),
        _meta("BRL", "Brazilian Real", "R$"),
        _meta("RUB", "Russian Ruble", "₽"),
        _meta("ZAR", "South African Rand", "R"),
        _meta("SEK", "Swedish Krona", "kr", SUFFIX),
        _meta("NOK", "Norwegian Krone", "kr", SUFFIX),
        _meta("DKK", "Danish Krone", "kr", SUFFIX),
        _meta("PLN", "Polish Złoty", "zł", SUFFIX),
        _meta("CZK", "Czech Koruna", "Kč", SUFFIX),
        _meta("HUF", "Hungarian Forint", "Ft", SUFFIX),
        _meta("TRY", "Turkish Lira", "₺"),
    )
}


def is_supported(code: object) -> bool:
    return isinstance(code, str) and code in CURRENCIES


def get_meta(code: str) -> Optional[CurrencyMeta]:
    return CURRENCIES.get(code)


def supported_codes() -> List[str]:
    """Supported codes in display order (base currency first)."""
    return list(CURRENCIES)
