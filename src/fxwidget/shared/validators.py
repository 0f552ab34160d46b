# src/fxwidget/shared/validators.py
"""
Input Validation Utilities - Configuration and Data Validation

This module provides validation functions for currency codes, API keys and
rate values so that configuration and persisted data are checked the same
way everywhere.

Files that USE this module:
- fxwidget.config.settings (uses validation functions in Settings field validators)
- fxwidget.adapters.providers.base (validate_rate_value when normalizing)
- fxwidget.application.rate_cache (validate_rate_value when loading)

Files that this module USES:
- fxwidget.domain.currencies (supported currency set)
"""
import math
import re

from fxwidget.domain.currencies import is_supported


def validate_currency_code(code: str) -> bool:
    """
    Validate that a currency code is a supported uppercase ISO code.

    Args:
        code: Currency code to validate

    Returns:
        True if valid, False otherwise
    """
    if not code or not isinstance(code, str):
        return False

    return bool(re.match(r'^[A-Z]{3}$', code)) and is_supported(code)


def validate_api_key(api_key: str, min_length: int = 4) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace() and " " not in api_key


def validate_rate_value(value: object) -> bool:
    """
    Validate a single exchange rate value.

    Args:
        value: Candidate rate

    Returns:
        True for strictly positive finite numbers (bools excluded), False otherwise
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0
