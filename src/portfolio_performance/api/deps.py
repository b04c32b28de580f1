"""Dependency injection for FastAPI."""

from typing import Generator

from fastapi import Depends

from portfolio_performance.config.settings import get_settings
from portfolio_performance.providers import StubMarketDataProvider, YFinanceMarketDataProvider
from portfolio_performance.providers.market_data_provider import MarketDataProvider
from portfolio_performance.repositories import Cache, InMemoryCache
from portfolio_performance.repositories.sqlalchemy import SqlAlchemyCache, get_session_factory
from portfolio_performance.services import MarketDataService

# Process-wide cache used when no cache database is configured
_memory_cache = InMemoryCache()


def get_market_provider() -> MarketDataProvider:
    """Provide the configured market data provider."""
    settings = get_settings()
    if settings.market_data_provider == "yfinance":
        return YFinanceMarketDataProvider(max_lookback_days=settings.fx_max_lookback_days)
    return StubMarketDataProvider(max_lookback_days=settings.fx_max_lookback_days)


def get_cache() -> Generator[Cache, None, None]:
    """Provide the persistent cache, or the in-memory one when unconfigured."""
    settings = get_settings()
    if not settings.cache_database_url:
        yield _memory_cache
        return

    db = get_session_factory()()
    try:
        yield SqlAlchemyCache(db)
    finally:
        db.close()


def get_market_data_service(
    provider: MarketDataProvider = Depends(get_market_provider),
    cache: Cache = Depends(get_cache),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    settings = get_settings()
    return MarketDataService(
        provider=provider,
        cache=cache,
        ticker_ttl_seconds=settings.ticker_cache_ttl_seconds,
        stock_split_ttl_seconds=settings.stock_split_cache_ttl_seconds,
    )
