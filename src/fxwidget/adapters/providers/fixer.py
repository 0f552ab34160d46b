# src/fxwidget/adapters/providers/fixer.py
"""
Fixer Provider

Second rate source. Expects {"base": "USD", "date": "...", "rates": {...}};
error bodies come back as {"success": false, "error": {...}} and are
handled by the base class.

Files that USE this module:
- fxwidget.adapters.providers (registry / default chain)
- tests.test_providers (unit tests)

Files that this module USES:
- fxwidget.adapters.providers.base (RateProvider)
- fxwidget.config (optional access key)
"""
from typing import Any, Dict, Optional, Tuple

from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.providers.base import RateProvider
from fxwidget.config import settings
from fxwidget.domain.errors import ParseError

DEFAULT_URL = "https://api.fixer.io/latest"


class FixerProvider(RateProvider):
    name = "fixer"

    def __init__(
        self,
        client: Optional[HttpClient] = None,
        base_url: Optional[str] = None,
        access_key: Optional[str] = None,
    ):
        super().__init__(client, base_url)
        self.access_key = settings.fixer_access_key if access_key is None else access_key

    def build_request(self, base: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        params: Dict[str, Any] = {"base": base}
        if self.access_key:
            params["access_key"] = self.access_key
        return self.base_url or DEFAULT_URL, params

    def extract_table(self, data: Dict[str, Any], base: str) -> Any:
        if "rates" not in data:
            raise ParseError(f"{self.name} response missing 'rates' field", self.name)
        # Free plans ignore the requested base and answer in EUR
        reported = data.get("base")
        if reported and str(reported).upper() != base:
            raise ParseError(f"{self.name} answered with base {reported}, expected {base}", self.name)
        return data["rates"]
