# src/fxwidget/adapters/providers/currencylayer.py
"""
CurrencyLayer Provider

Last live source before the offline table. Rates come back under "quotes"
keyed by the source currency followed by the quote currency:
{"success": true, "source": "USD", "quotes": {"USDEUR": 0.85, ...}}.
The source prefix is stripped; the source currency itself is not listed
and gets injected as 1.0 by the base class.

Files that USE this module:
- fxwidget.adapters.providers (registry / default chain)
- tests.test_providers (unit tests)

Files that this module USES:
- fxwidget.adapters.providers.base (RateProvider)
- fxwidget.config (access key)
- fxwidget.domain.currencies (codes to request)
"""
from typing import Any, Dict, Mapping, Optional, Tuple

from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.providers.base import RateProvider
from fxwidget.config import settings
from fxwidget.domain.currencies import supported_codes
from fxwidget.domain.errors import ParseError

DEFAULT_URL = "https://api.currencylayer.com/live"


class CurrencyLayerProvider(RateProvider):
    name = "currencylayer"

    def __init__(
        self,
        client: Optional[HttpClient] = None,
        base_url: Optional[str] = None,
        access_key: Optional[str] = None,
    ):
        super().__init__(client, base_url)
        self.access_key = settings.currencylayer_access_key if access_key is None else access_key

    def build_request(self, base: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        params: Dict[str, Any] = {
            "source": base,
            "currencies": ",".join(c for c in supported_codes() if c != base),
            "format": 1,
        }
        if self.access_key:
            params["access_key"] = self.access_key
        return self.base_url or DEFAULT_URL, params

    def extract_table(self, data: Dict[str, Any], base: str) -> Any:
        quotes = data.get("quotes")
        if not isinstance(quotes, Mapping):
            raise ParseError(f"{self.name} response missing 'quotes' field", self.name)
        table = {}
        for key, value in quotes.items():
            key = str(key).upper()
            if len(key) == 2 * len(base) and key.startswith(base):
                table[key[len(base):]] = value
        return table
