"""
Formatting Adapters - Display Formatting

This package contains display formatting for amounts and rate summaries.
"""

from fxwidget.adapters.formatting.formatter import (
    format_currency,
    format_pair_line,
    format_rate_summary,
)

__all__ = [
    "format_currency",
    "format_pair_line",
    "format_rate_summary",
]
