# tests/test_formatter.py
"""
Formatter Tests - Unit Tests for Display Text Functions

This module contains unit tests for currency amount formatting (symbols,
fraction digits, rounding, grouping) and the rate summary lines.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxwidget.adapters.formatting.formatter (all formatter functions for testing)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from fxwidget.adapters.formatting.formatter import (
    format_currency,  # Format an amount in a currency
    format_pair_line,  # Favorite-list line
    format_rate_summary,  # "Rate: 1 USD = €0.85"
)


class TestFormatCurrency:
    """Tests for format_currency()."""

    @pytest.mark.parametrize("amount,code,expected", [
        (85, "EUR", "€85.00"),
        (1, "USD", "$1.00"),
        (0.73, "GBP", "£0.73"),
        (110500, "JPY", "¥110,500"),
        (1150000, "KRW", "₩1,150,000"),
        (1234, "HUF", "1,234 Ft"),
        (10.5, "SEK", "10.50 kr"),
        (3.85, "PLN", "3.85 zł"),
        (1.25, "CAD", "C$1.25"),
    ])
    def test_symbols_and_digits(self, amount, code, expected):
        assert format_currency(amount, code) == expected

    def test_two_decimal_currencies_are_not_grouped(self):
        assert format_currency(1234567.891, "USD") == "$1234567.89"

    def test_half_up_rounding(self):
        assert format_currency(0.125, "USD") == "$0.13"
        assert format_currency(2.5, "JPY") == "¥3"

    def test_negative_zero_is_plain_zero(self):
        assert format_currency(-0.001, "USD") == "$0.00"

    def test_negative_amount(self):
        assert format_currency(-5, "USD") == "$-5.00"

    def test_unknown_code_has_no_symbol(self):
        assert format_currency(12.345, "ABC") == "12.35"

    def test_non_numeric_input_counts_as_zero(self):
        assert format_currency("abc", "USD") == "$0.00"
        assert format_currency(None, "EUR") == "€0.00"

    def test_amount_beyond_float_range(self):
        assert format_currency(10 ** 400, "USD") == "$0.00"
        assert format_currency(10 ** 400, "JPY") == "¥0"

    def test_numeric_string(self):
        assert format_currency("42.5", "EUR") == "€42.50"

    def test_non_finite(self):
        assert format_currency(float("nan"), "USD") == "nan"
        assert format_currency(float("inf"), "USD") == "inf"


class TestRateLines:
    """Tests for the rate summary and favorite-list lines."""

    def test_rate_summary(self):
        assert format_rate_summary("USD", "EUR", 0.85) == "Rate: 1 USD = €0.85"

    def test_rate_summary_zero_decimal_target(self):
        assert format_rate_summary("USD", "JPY", 110.5) == "Rate: 1 USD = ¥111"

    def test_pair_line(self):
        assert format_pair_line("USD", "EUR", 0.85) == "$1.00 = €0.85"
