"""Performance sampled over consecutive fixed-length windows."""

from datetime import datetime, timedelta

from portfolio_performance.core.exceptions import ValidationError
from portfolio_performance.core.timezone import to_utc
from portfolio_performance.domain.models import (
    Currency,
    PerformanceSeries,
    PerformanceSeriesPoint,
    Transaction,
)
from portfolio_performance.services.performance_engine import PerformanceEngine


def get_performance_series(
    engine: PerformanceEngine,
    transactions: list[Transaction],
    start: datetime,
    end: datetime,
    interval_days: int,
    currency: Currency,
) -> PerformanceSeries:
    """
    Compute performance for [cursor, cursor + interval] windows from start.

    Each point is stamped with its window end. The last window may extend
    past end; an empty series is returned when start >= end.
    """
    if interval_days <= 0:
        raise ValidationError(f"interval_days must be positive, got {interval_days}")

    step = timedelta(days=interval_days)
    cursor = to_utc(start)
    end = to_utc(end)

    series: PerformanceSeries = []
    while cursor < end:
        window_end = cursor + step
        performance = engine.get_performance(transactions, cursor, window_end, currency)
        series.append(PerformanceSeriesPoint(time=window_end, performance=performance))
        cursor = window_end

    return series
