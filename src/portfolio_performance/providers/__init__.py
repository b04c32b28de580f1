"""Market data providers module."""

from portfolio_performance.providers.market_data_provider import (
    MarketDataProvider,
    SearchProvider,
    HistoricalPriceProvider,
    HistoricalFXProvider,
    StockSplitProvider,
    value_on_or_before,
)
from portfolio_performance.providers.stub_provider import StubMarketDataProvider
from portfolio_performance.providers.yfinance_provider import YFinanceMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "SearchProvider",
    "HistoricalPriceProvider",
    "HistoricalFXProvider",
    "StockSplitProvider",
    "value_on_or_before",
    "StubMarketDataProvider",
    "YFinanceMarketDataProvider",
]
