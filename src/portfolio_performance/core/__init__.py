"""Core utilities and shared functionality."""

from portfolio_performance.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    day_key,
    UTC,
)
from portfolio_performance.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    TickerNotFoundError,
    DanglingDividendError,
    InvalidCachedPriceError,
    UnresolvableFXDateError,
    LotMatchingError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "day_key",
    "UTC",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "TickerNotFoundError",
    "DanglingDividendError",
    "InvalidCachedPriceError",
    "UnresolvableFXDateError",
    "LotMatchingError",
]
