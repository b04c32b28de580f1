"""Performance result models."""

from dataclasses import dataclass, field
from datetime import datetime

from portfolio_performance.domain.models.money import Money
from portfolio_performance.domain.models.position import Position


@dataclass(frozen=True)
class PositionPerformance:
    """A position enriched with its cost, market value and P/L."""

    position: Position
    total_price: Money
    total_value: Money
    realised_pl: Money
    unrealised_pl: Money


@dataclass(frozen=True)
class Performance:
    """Portfolio valuation and P/L snapshot for one window."""

    total_value: Money
    unrealised_pl: Money
    realised_pl: Money
    open_positions: list[PositionPerformance] = field(default_factory=list)
    closed_positions: list[PositionPerformance] = field(default_factory=list)


@dataclass(frozen=True)
class PerformanceSeriesPoint:
    """Performance stamped with the end time of its window."""

    time: datetime
    performance: Performance


PerformanceSeries = list[PerformanceSeriesPoint]
