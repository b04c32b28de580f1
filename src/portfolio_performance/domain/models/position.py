"""Position domain models derived from the transaction ledger."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Union

from portfolio_performance.domain.models.enums import PositionKind
from portfolio_performance.domain.models.money import Money
from portfolio_performance.domain.models.transaction import (
    DividendTransaction,
    Security,
    SecurityTransaction,
    Transaction,
)


@dataclass
class SecurityPosition:
    """
    Holding of a single security.

    shares == 0 means the position has closed. in_transactions add money to
    the account (sales), out_transactions remove it (purchases); both are
    kept in chronological order, which lot matching relies on.
    """

    security: Security
    shares: Decimal
    in_transactions: list[SecurityTransaction] = field(default_factory=list)
    out_transactions: list[SecurityTransaction] = field(default_factory=list)
    dividend_transactions: list[DividendTransaction] = field(default_factory=list)
    transactions: list[SecurityTransaction] = field(default_factory=list)
    kind: PositionKind = field(default=PositionKind.SECURITY, init=False)

    @property
    def is_closed(self) -> bool:
        return self.shares == 0


@dataclass
class CashPosition:
    """Running cash balance in one currency."""

    value: Money
    in_transactions: list[Transaction] = field(default_factory=list)
    out_transactions: list[Transaction] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    kind: PositionKind = field(default=PositionKind.CASH, init=False)


Position = Union[SecurityPosition, CashPosition]


def is_security_position(position: Position) -> bool:
    return position.kind == PositionKind.SECURITY


def is_cash_position(position: Position) -> bool:
    return position.kind == PositionKind.CASH


@dataclass
class Positions:
    """
    Portfolio state as of the end of a window.

    security_positions lists open positions in the order they were opened,
    followed by closed positions in the order they closed.
    """

    transactions: list[Transaction] = field(default_factory=list)
    security_positions: list[SecurityPosition] = field(default_factory=list)
    cash_positions: list[CashPosition] = field(default_factory=list)

    @property
    def open_security_positions(self) -> list[SecurityPosition]:
        return [p for p in self.security_positions if not p.is_closed]

    @property
    def closed_security_positions(self) -> list[SecurityPosition]:
        return [p for p in self.security_positions if p.is_closed]
