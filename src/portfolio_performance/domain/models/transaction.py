"""Transaction domain models.

Sign convention for ``value.amount``:
- positive: money coming into the account (deposit, sale, dividend)
- negative: money leaving the account (withdrawal, purchase)
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Union

from portfolio_performance.core.timezone import to_utc
from portfolio_performance.domain.models.enums import TransactionKind
from portfolio_performance.domain.models.money import Money


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass
class Security:
    """A tradable security, identified by its ISIN."""

    isin: str
    metadata: dict = field(default_factory=dict)


@dataclass
class CashTransaction:
    """Deposit (positive amount) or withdrawal (negative amount)."""

    time: datetime
    value: Money
    metadata: dict = field(default_factory=dict)
    kind: TransactionKind = field(default=TransactionKind.CASH, init=False)

    def __post_init__(self) -> None:
        self.time = to_utc(self.time)


@dataclass
class SecurityTransaction:
    """
    Purchase or sale of shares.

    A purchase has a negative value and positive shares; a sale has a
    positive value and negative shares.
    """

    time: datetime
    value: Money
    security: Security
    shares: Decimal
    metadata: dict = field(default_factory=dict)
    kind: TransactionKind = field(default=TransactionKind.SECURITY, init=False)

    def __post_init__(self) -> None:
        self.time = to_utc(self.time)
        self.shares = _as_decimal(self.shares)


@dataclass
class DividendTransaction:
    """Dividend paid out by a held security."""

    time: datetime
    value: Money
    security: Security
    metadata: dict = field(default_factory=dict)
    kind: TransactionKind = field(default=TransactionKind.DIVIDEND, init=False)

    def __post_init__(self) -> None:
        self.time = to_utc(self.time)


Transaction = Union[CashTransaction, SecurityTransaction, DividendTransaction]


def is_security_transaction(transaction: Transaction) -> bool:
    return transaction.kind == TransactionKind.SECURITY


def is_dividend_transaction(transaction: Transaction) -> bool:
    return transaction.kind == TransactionKind.DIVIDEND
