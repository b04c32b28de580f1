"""Service layer - business logic over the domain models."""

from portfolio_performance.services.portfolio_engine import get_positions
from portfolio_performance.services.market_data_service import MarketDataService
from portfolio_performance.services.split_corrector import get_stock_split_corrected_transactions
from portfolio_performance.services.performance_engine import (
    PerformanceEngine,
    FIFOPerformanceEngine,
    LIFOPerformanceEngine,
    WACPerformanceEngine,
    get_performance_engine,
)
from portfolio_performance.services.performance_series import get_performance_series
from portfolio_performance.services.transaction_filter import filter_transactions
from portfolio_performance.services.cache_warmer import warm_price_cache
from portfolio_performance.services.pipeline import run_pipeline

__all__ = [
    "get_positions",
    "MarketDataService",
    "get_stock_split_corrected_transactions",
    "PerformanceEngine",
    "FIFOPerformanceEngine",
    "LIFOPerformanceEngine",
    "WACPerformanceEngine",
    "get_performance_engine",
    "get_performance_series",
    "filter_transactions",
    "warm_price_cache",
    "run_pipeline",
]
