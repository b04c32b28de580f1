"""Application settings and configuration."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_performance.domain.models.money import Currency

ONE_DAY_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Portfolio Performance Engine"
    app_version: str = "0.1.0"

    log_level: str = "INFO"

    # Currency results are reported in unless a request says otherwise
    base_currency: Currency = Currency.USD

    # Market data source: "stub" (offline, deterministic) or "yfinance"
    market_data_provider: Literal["stub", "yfinance"] = "stub"

    # Persistent cache database URL; in-memory cache when unset
    cache_database_url: Optional[str] = None

    # Cache lifetimes for lookups that may change after the fact
    ticker_cache_ttl_seconds: int = 365 * ONE_DAY_SECONDS
    stock_split_cache_ttl_seconds: int = ONE_DAY_SECONDS

    # Days to walk back from a missing date before giving up
    fx_max_lookback_days: int = 14

    # Relative price divergence above which a security is filtered out
    filter_epsilon: float = 0.10


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
