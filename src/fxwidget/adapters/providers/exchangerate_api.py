# src/fxwidget/adapters/providers/exchangerate_api.py
"""
ExchangeRate-API Provider

Primary rate source. Without a key it uses the open v4 endpoint, which
returns {"base": "USD", "rates": {...}}. With EXCHANGERATE_API_KEY set it
uses the v6 endpoint, which nests the table under "conversion_rates" and
reports failures as {"result": "error", "error-type": "..."}.

Files that USE this module:
- fxwidget.adapters.providers (registry / default chain)
- tests.test_providers (unit tests)

Files that this module USES:
- fxwidget.adapters.providers.base (RateProvider)
- fxwidget.config (API key)
"""
from typing import Any, Dict, Optional, Tuple

from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.providers.base import RateProvider
from fxwidget.config import settings
from fxwidget.domain.errors import ParseError

OPEN_URL = "https://api.exchangerate-api.com/v4/latest"
KEYED_URL = "https://v6.exchangerate-api.com/v6"


class ExchangeRateApiProvider(RateProvider):
    name = "exchangerate-api"

    def __init__(
        self,
        client: Optional[HttpClient] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(client, base_url)
        self.api_key = settings.exchangerate_api_key if api_key is None else api_key

    @property
    def table_key(self) -> str:
        return "conversion_rates" if self.api_key else "rates"

    def build_request(self, base: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        if self.api_key:
            root = self.base_url or KEYED_URL
            return f"{root}/{self.api_key}/latest/{base}", None
        root = self.base_url or OPEN_URL
        return f"{root}/{base}", None

    def extract_table(self, data: Dict[str, Any], base: str) -> Any:
        if data.get("result") == "error":
            raise ParseError(f"{self.name} reported an error: {data.get('error-type')}", self.name)
        if self.table_key not in data:
            raise ParseError(f"{self.name} response missing '{self.table_key}' field", self.name)
        return data[self.table_key]
