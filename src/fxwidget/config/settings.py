"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables (or a .env file) with validation.

Files that USE this module:
- fxwidget.app (builds providers, stores and the controller from settings)
- fxwidget.adapters.providers.* (API keys and timeouts)
- fxwidget.application.* (TTL, favorites capacity, storage keys)

Files that this module USES:
- fxwidget.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import List, Optional  # Type hints for lists and optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from fxwidget.shared.validators import (
    validate_api_key,  # Validate API key format
    validate_currency_code,  # Validate supported currency codes
)


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Rates ---
    base_currency: str = Field(default="USD", alias="FXWIDGET_BASE_CURRENCY")
    rates_ttl_minutes: int = Field(default=60, alias="RATES_TTL_MINUTES", ge=1, le=1440)

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    user_agent: str = Field(default="fxwidget/1.0", alias="FXWIDGET_USER_AGENT")

    # --- API Providers (all optional; keyless endpoints are used when empty) ---
    exchangerate_api_key: str = Field(default="", alias="EXCHANGERATE_API_KEY")
    fixer_access_key: str = Field(default="", alias="FIXER_ACCESS_KEY")
    openexchangerates_app_id: str = Field(default="", alias="OPENEXCHANGERATES_APP_ID")
    currencylayer_access_key: str = Field(default="free", alias="CURRENCYLAYER_ACCESS_KEY")

    # --- Favorites ---
    favorites_capacity: int = Field(default=5, alias="FAVORITES_CAPACITY", ge=1, le=50)

    # --- Persistence ---
    storage_file: Path = Field(
        default=Path("./data/fxwidget.json"), alias="FXWIDGET_STORAGE_FILE"
    )
    rates_storage_key: str = Field(default="fxwidget.rates", alias="RATES_STORAGE_KEY")
    favorites_storage_key: str = Field(default="fxwidget.favorites", alias="FAVORITES_STORAGE_KEY")

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FXWIDGET_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def rates_ttl_ms(self) -> int:
        """Cache time-to-live in epoch milliseconds."""
        return self.rates_ttl_minutes * 60 * 1000

    @property
    def rates_ttl_seconds(self) -> float:
        return self.rates_ttl_minutes * 60.0

    @property
    def provider_order(self) -> List[str]:
        """
        Names of the providers in the default fallback chain, in priority order.

        OpenExchangeRates has no keyless endpoint, so it is only included
        when an app id is configured.
        """
        order = ["exchangerate-api", "fixer"]
        if self.openexchangerates_app_id:
            order.append("openexchangerates")
        order.append("currencylayer")
        return order

    @field_validator("base_currency")
    @classmethod
    def validate_base_currency(cls, v: str) -> str:
        """Validate base currency code."""
        v = v.strip().upper()
        if not validate_currency_code(v):
            raise ValueError(f"Unsupported base currency: {v}")
        return v

    @field_validator(
        "exchangerate_api_key",
        "fixer_access_key",
        "openexchangerates_app_id",
        "currencylayer_access_key",
    )
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format when a key is set."""
        v = v.strip()
        if v and not validate_api_key(v):
            raise ValueError("Invalid API key format")
        return v


# Global settings instance
settings = Settings()
