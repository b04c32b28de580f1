"""Domain models package."""

from portfolio_performance.domain.models.enums import (
    TransactionKind,
    PositionKind,
    CostBasisMethod,
    Interval,
    Exchange,
)
from portfolio_performance.domain.models.money import (
    Currency,
    Money,
    OHLC,
    money_amount_string_to_integer,
)
from portfolio_performance.domain.models.transaction import (
    Security,
    CashTransaction,
    SecurityTransaction,
    DividendTransaction,
    Transaction,
    is_security_transaction,
    is_dividend_transaction,
)
from portfolio_performance.domain.models.position import (
    SecurityPosition,
    CashPosition,
    Position,
    Positions,
    is_security_position,
    is_cash_position,
)
from portfolio_performance.domain.models.performance import (
    PositionPerformance,
    Performance,
    PerformanceSeriesPoint,
    PerformanceSeries,
)
from portfolio_performance.domain.models.market_data import (
    SearchResultItem,
    PriceAtClose,
    HistoricalPrices,
    ExchangeRateAtClose,
    Split,
)

__all__ = [
    "TransactionKind",
    "PositionKind",
    "CostBasisMethod",
    "Interval",
    "Exchange",
    "Currency",
    "Money",
    "OHLC",
    "money_amount_string_to_integer",
    "Security",
    "CashTransaction",
    "SecurityTransaction",
    "DividendTransaction",
    "Transaction",
    "is_security_transaction",
    "is_dividend_transaction",
    "SecurityPosition",
    "CashPosition",
    "Position",
    "Positions",
    "is_security_position",
    "is_cash_position",
    "PositionPerformance",
    "Performance",
    "PerformanceSeriesPoint",
    "PerformanceSeries",
    "SearchResultItem",
    "PriceAtClose",
    "HistoricalPrices",
    "ExchangeRateAtClose",
    "Split",
]
