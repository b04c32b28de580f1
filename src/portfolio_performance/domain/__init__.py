"""Domain layer - pure business models with no external dependencies."""

from portfolio_performance.domain.models import (
    Currency,
    Money,
    Security,
    CashTransaction,
    SecurityTransaction,
    DividendTransaction,
    Transaction,
    SecurityPosition,
    CashPosition,
    Positions,
    Performance,
    PositionPerformance,
    PerformanceSeriesPoint,
    CostBasisMethod,
)

__all__ = [
    "Currency",
    "Money",
    "Security",
    "CashTransaction",
    "SecurityTransaction",
    "DividendTransaction",
    "Transaction",
    "SecurityPosition",
    "CashPosition",
    "Positions",
    "Performance",
    "PositionPerformance",
    "PerformanceSeriesPoint",
    "CostBasisMethod",
]
