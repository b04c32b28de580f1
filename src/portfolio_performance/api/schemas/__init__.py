"""Pydantic schemas for API request/response."""

from portfolio_performance.api.schemas.transaction import (
    MoneySchema,
    TransactionIn,
    LedgerRequest,
    PerformanceRequest,
    PerformanceSeriesRequest,
)
from portfolio_performance.api.schemas.performance import (
    SecurityPositionResponse,
    PositionsResponse,
    PositionPerformanceResponse,
    PerformanceResponse,
    PerformanceSeriesPointResponse,
    PerformanceSeriesResponse,
)

__all__ = [
    "MoneySchema",
    "TransactionIn",
    "LedgerRequest",
    "PerformanceRequest",
    "PerformanceSeriesRequest",
    "SecurityPositionResponse",
    "PositionsResponse",
    "PositionPerformanceResponse",
    "PerformanceResponse",
    "PerformanceSeriesPointResponse",
    "PerformanceSeriesResponse",
]
