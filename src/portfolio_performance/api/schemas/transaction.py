"""Pydantic schemas for ledger input."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from portfolio_performance.domain.models import (
    CashTransaction,
    CostBasisMethod,
    Currency,
    DividendTransaction,
    Money,
    Security,
    SecurityTransaction,
    Transaction,
    TransactionKind,
)


class MoneySchema(BaseModel):
    """Amount in integer minor units (cents, pence, ...)."""

    currency: Currency
    amount: int

    def to_domain(self) -> Money:
        return Money(currency=self.currency, amount=self.amount)

    @classmethod
    def from_domain(cls, money: Money) -> "MoneySchema":
        return cls(currency=money.currency, amount=money.amount)


class TransactionIn(BaseModel):
    """A single ledger entry; isin is required for SECURITY and DIVIDEND."""

    kind: TransactionKind = Field(..., description="CASH, SECURITY or DIVIDEND")
    time: datetime = Field(..., description="Execution time; naive times are UTC")
    value: MoneySchema = Field(..., description="Signed cash impact on the account")
    isin: Optional[str] = Field(default=None, min_length=12, max_length=12)
    shares: Optional[Decimal] = Field(
        default=None,
        description="Shares bought (positive) or sold (negative); SECURITY only",
    )
    metadata: dict = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_kind_fields(self) -> "TransactionIn":
        if self.kind in (TransactionKind.SECURITY, TransactionKind.DIVIDEND) and not self.isin:
            raise ValueError(f"isin is required for {self.kind.value} transactions")
        if self.kind == TransactionKind.SECURITY and self.shares is None:
            raise ValueError("shares is required for SECURITY transactions")
        return self

    def to_domain(self) -> Transaction:
        if self.kind == TransactionKind.SECURITY:
            return SecurityTransaction(
                time=self.time,
                value=self.value.to_domain(),
                security=Security(isin=self.isin),
                shares=self.shares,
                metadata=self.metadata,
            )
        if self.kind == TransactionKind.DIVIDEND:
            return DividendTransaction(
                time=self.time,
                value=self.value.to_domain(),
                security=Security(isin=self.isin),
                metadata=self.metadata,
            )
        return CashTransaction(
            time=self.time,
            value=self.value.to_domain(),
            metadata=self.metadata,
        )


class LedgerRequest(BaseModel):
    """Full transaction history, in chronological order, and a window."""

    transactions: list[TransactionIn]
    start: datetime
    end: datetime

    def to_domain(self) -> list[Transaction]:
        return [t.to_domain() for t in self.transactions]


class PerformanceRequest(LedgerRequest):
    """Ledger window valued in currency (defaults to the configured base currency)."""

    currency: Optional[Currency] = None
    method: CostBasisMethod = CostBasisMethod.FIFO


class PerformanceSeriesRequest(PerformanceRequest):
    """Performance sampled every interval_days from start to end."""

    interval_days: int = Field(..., description="Window length in days")
