"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from fxwidget.shared.validators import (
    validate_api_key,
    validate_currency_code,
    validate_rate_value,
)
from fxwidget.shared.logging_conf import setup_logging

__all__ = [
    "validate_api_key",
    "validate_currency_code",
    "validate_rate_value",
    "setup_logging",
]
