"""Pydantic schemas for position and performance responses."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from portfolio_performance.api.schemas.transaction import MoneySchema
from portfolio_performance.domain.models import (
    Performance,
    PerformanceSeriesPoint,
    PositionKind,
    PositionPerformance,
    Positions,
    SecurityPosition,
    is_security_position,
)


class SecurityPositionResponse(BaseModel):
    """Share count of one security position."""

    isin: str
    shares: Decimal
    is_closed: bool
    transaction_count: int

    @classmethod
    def from_domain(cls, position: SecurityPosition) -> "SecurityPositionResponse":
        return cls(
            isin=position.security.isin,
            shares=position.shares,
            is_closed=position.is_closed,
            transaction_count=len(position.transactions),
        )


class PositionsResponse(BaseModel):
    """Security holdings and cash balances at the window end."""

    security_positions: list[SecurityPositionResponse]
    cash_positions: list[MoneySchema]

    @classmethod
    def from_domain(cls, positions: Positions) -> "PositionsResponse":
        return cls(
            security_positions=[
                SecurityPositionResponse.from_domain(p) for p in positions.security_positions
            ],
            cash_positions=[MoneySchema.from_domain(c.value) for c in positions.cash_positions],
        )


class PositionPerformanceResponse(BaseModel):
    """Valuation of a single cash or security position."""

    kind: PositionKind
    isin: Optional[str] = None
    shares: Optional[Decimal] = None
    total_price: MoneySchema
    total_value: MoneySchema
    realised_pl: MoneySchema
    unrealised_pl: MoneySchema

    @classmethod
    def from_domain(cls, item: PositionPerformance) -> "PositionPerformanceResponse":
        position = item.position
        is_security = is_security_position(position)
        return cls(
            kind=position.kind,
            isin=position.security.isin if is_security else None,
            shares=position.shares if is_security else None,
            total_price=MoneySchema.from_domain(item.total_price),
            total_value=MoneySchema.from_domain(item.total_value),
            realised_pl=MoneySchema.from_domain(item.realised_pl),
            unrealised_pl=MoneySchema.from_domain(item.unrealised_pl),
        )


class PerformanceResponse(BaseModel):
    """Portfolio valuation and P/L for one window."""

    total_value: MoneySchema
    unrealised_pl: MoneySchema
    realised_pl: MoneySchema
    open_positions: list[PositionPerformanceResponse]
    closed_positions: list[PositionPerformanceResponse]

    @classmethod
    def from_domain(cls, performance: Performance) -> "PerformanceResponse":
        return cls(
            total_value=MoneySchema.from_domain(performance.total_value),
            unrealised_pl=MoneySchema.from_domain(performance.unrealised_pl),
            realised_pl=MoneySchema.from_domain(performance.realised_pl),
            open_positions=[
                PositionPerformanceResponse.from_domain(p) for p in performance.open_positions
            ],
            closed_positions=[
                PositionPerformanceResponse.from_domain(p) for p in performance.closed_positions
            ],
        )


class PerformanceSeriesPointResponse(BaseModel):
    """Performance of the window ending at time."""

    time: datetime
    performance: PerformanceResponse

    @classmethod
    def from_domain(cls, point: PerformanceSeriesPoint) -> "PerformanceSeriesPointResponse":
        return cls(time=point.time, performance=PerformanceResponse.from_domain(point.performance))


class PerformanceSeriesResponse(BaseModel):
    """Consecutive performance points, oldest first."""

    points: list[PerformanceSeriesPointResponse]
