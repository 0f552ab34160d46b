# src/fxwidget/adapters/providers/openexchangerates.py
"""
Open Exchange Rates Provider

Requires an app id (OPENEXCHANGERATES_APP_ID). Expects
{"base": "USD", "timestamp": ..., "rates": {...}}; invalid ids are answered
with HTTP 401 and surface as HttpError.

Files that USE this module:
- fxwidget.adapters.providers (registry / default chain when an app id is set)
- tests.test_providers (unit tests)

Files that this module USES:
- fxwidget.adapters.providers.base (RateProvider)
- fxwidget.config (app id)
"""
from typing import Any, Dict, Optional, Tuple

from fxwidget.adapters.http_client import HttpClient
from fxwidget.adapters.providers.base import RateProvider
from fxwidget.config import settings
from fxwidget.domain.errors import ParseError

DEFAULT_URL = "https://openexchangerates.org/api/latest.json"


class OpenExchangeRatesProvider(RateProvider):
    name = "openexchangerates"

    def __init__(
        self,
        client: Optional[HttpClient] = None,
        base_url: Optional[str] = None,
        app_id: Optional[str] = None,
    ):
        """
        Raises:
            ValueError: If no app id is configured
        """
        super().__init__(client, base_url)
        self.app_id = settings.openexchangerates_app_id if app_id is None else app_id
        if not self.app_id:
            raise ValueError("Open Exchange Rates app id not configured (OPENEXCHANGERATES_APP_ID).")

    def build_request(self, base: str) -> Tuple[str, Optional[Dict[str, Any]]]:
        return self.base_url or DEFAULT_URL, {"app_id": self.app_id, "base": base}

    def extract_table(self, data: Dict[str, Any], base: str) -> Any:
        if data.get("error"):
            raise ParseError(f"{self.name} reported an error: {data.get('message')}", self.name)
        if "rates" not in data:
            raise ParseError(f"{self.name} response missing 'rates' field", self.name)
        return data["rates"]
