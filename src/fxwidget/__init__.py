# src/fxwidget/__init__.py
"""
fxwidget - Exchange Rate Engine for a Dashboard Currency Converter

Fetches exchange rates from several providers in priority order with a
per-attempt timeout, caches them for an hour, falls back to an offline
rate table when every provider fails, and converts and formats amounts between
21 supported currencies.
"""

__version__ = "1.0.0"
