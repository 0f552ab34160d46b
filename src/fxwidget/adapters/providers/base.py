# src/fxwidget/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for all rate source adapters.
An adapter performs one GET against its provider and collapses the
provider's response shape into the canonical rate map (base currency = 1,
supported codes only, strictly positive finite values). Failures are
classified into NetworkError, HttpError, ParseError and FetchTimeoutError.

Adapters are stateless: no caching, no shared state, one request per call.

Files that USE this module:
- fxwidget.adapters.providers.* (every concrete provider extends RateProvider)
- fxwidget.application.fetcher (FallbackFetcher iterates RateProvider instances)
- tests.test_providers (unit tests)

Files that this module USES:
- fxwidget.adapters.http_client (HttpClient for the GET)
- fxwidget.domain (errors, currency catalogue, RateMap)
- fxwidget.shared.validators (validate_rate_value)
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from fxwidget.adapters.http_client import HttpClient
from fxwidget.domain.currencies import BASE_CURRENCY, is_supported
from fxwidget.domain.errors import (
    FetchTimeoutError,
    HttpError,
    NetworkError,
    ParseError,
)
from fxwidget.domain.models import RateMap
from fxwidget.shared.validators import validate_rate_value

log = logging.getLogger(__name__)


def normalize_rates(table: Any, base: str, provider: str) -> RateMap:
    """
    Collapse a provider rate table into a canonical rate map.

    Unsupported codes and invalid values are dropped; the base currency is
    always set to exactly 1.0, even when the provider omits it.

    Args:
        table: Mapping of currency code -> rate (numbers or numeric strings)
        base: Base currency the table is expressed in
        provider: Provider name used in error messages

    Returns:
        Rate map with the base currency first

    Raises:
        ParseError: If the table is not a mapping or holds no usable rate besides the base
    """
    if not isinstance(table, Mapping):
        raise ParseError(f"{provider} rate table is not an object", provider)

    rates: Dict[str, float] = {}
    for raw_code, raw_value in table.items():
        code = str(raw_code).strip().upper()
        if code == base or not is_supported(code):
            continue
        value = raw_value
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                pass
        if not validate_rate_value(value):
            log.debug("%s: dropping invalid rate %s=%r", provider, code, raw_value)
            continue
        rates[code] = float(value)

    if not rates:
        raise ParseError(f"{provider} returned no usable rates", provider)

    return {base: 1.0, **rates}


class RateProvider(ABC):
    """
    One external exchange rate source.

    Subclasses implement `build_request` (endpoint and query parameters) and
    `extract_table` (where the provider keeps its rates).
    """

    name: str = "provider"

    def __init__(self, client: Optional[HttpClient] = None, base_url: Optional[str] = None):
        """
        Initialize provider.

        Args:
            client: Optional shared HttpClient (a private one is created otherwise)
            base_url: Optional custom endpoint (defaults to the provider's public URL)
        """
        self.client = client or HttpClient()
        self.base_url = base_url

    @abstractmethod
    def build_request(self, base: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        """Return the URL and query parameters for a latest-rates request."""
        raise NotImplementedError

    @abstractmethod
    def extract_table(self, data: Dict[str, Any], base: str) -> Any:
        """
        Return the provider's rate table from a decoded response body.

        Raises:
            ParseError: If the body does not have the provider's shape
        """
        raise NotImplementedError

    async def fetch(self, base: str = BASE_CURRENCY) -> RateMap:
        """
        Fetch and normalize the latest rates relative to `base`.

        Returns:
            Canonical rate map with `base` set to 1.0

        Raises:
            NetworkError, HttpError, ParseError, FetchTimeoutError
        """
        url, params = self.build_request(base)
        data = await self._get_json(url, params)
        return self.parse(data, base)

    def parse(self, data: Any, base: str = BASE_CURRENCY) -> RateMap:
        """Normalize an already decoded response body."""
        if not isinstance(data, dict):
            raise ParseError(f"{self.name} returned non-object JSON", self.name)
        self._raise_for_error_body(data)
        table = self.extract_table(data, base)
        return normalize_rates(table, base, self.name)

    def _raise_for_error_body(self, data: Dict[str, Any]) -> None:
        # Several providers answer 200 with {"success": false, "error": {...}}
        if data.get("success") is False:
            error = data.get("error")
            if isinstance(error, dict):
                detail = error.get("info") or error.get("type") or error.get("code")
            else:
                detail = error
            raise ParseError(f"{self.name} reported an error: {detail}", self.name)

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]]) -> Any:
        try:
            resp = await self.client.get(url, params)
        except requests.exceptions.Timeout as e:
            raise FetchTimeoutError(f"{self.name} timed out: {e}", self.name) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{self.name} request failed: {e}", self.name) from e

        if resp.status_code >= 400:
            raise HttpError(resp.status_code, self.name)

        try:
            return resp.json()
        except ValueError as e:
            raise ParseError(f"{self.name} returned invalid JSON: {e}", self.name) from e

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
