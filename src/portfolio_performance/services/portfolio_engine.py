"""Portfolio engine for deriving positions and cash from the ledger."""

import logging
from datetime import datetime
from decimal import Decimal

from portfolio_performance.core.exceptions import DanglingDividendError
from portfolio_performance.core.timezone import to_utc
from portfolio_performance.domain.models import (
    CashPosition,
    Currency,
    Money,
    Positions,
    SecurityPosition,
    Transaction,
    is_dividend_transaction,
    is_security_transaction,
)

logger = logging.getLogger(__name__)


def get_positions(
    start: datetime,
    end: datetime,
    full_transaction_history: list[Transaction],
) -> Positions:
    """
    Replay the ledger up to end and return the resulting positions.

    full_transaction_history must hold every transaction since inception
    (not only those inside the window) in chronological order. Closed
    positions are only reported when they closed on or after start.
    """
    start = to_utc(start)
    end = to_utc(end)

    transactions: list[Transaction] = []
    cash: dict[Currency, CashPosition] = {}
    # Insertion order of the dict is first-open order
    open_positions: dict[str, SecurityPosition] = {}
    closed_positions: list[SecurityPosition] = []

    for transaction in full_transaction_history:
        if transaction.time > end:
            continue
        transactions.append(transaction)

        if is_security_transaction(transaction):
            isin = transaction.security.isin
            position = open_positions.get(isin)
            if position is None:
                position = SecurityPosition(
                    security=transaction.security,
                    shares=Decimal(0),
                )
                open_positions[isin] = position

            position.transactions.append(transaction)
            position.shares += transaction.shares
            if transaction.value.amount > 0:
                position.in_transactions.append(transaction)
            else:
                position.out_transactions.append(transaction)

            if position.shares == 0:
                del open_positions[isin]
                if transaction.time >= start:
                    closed_positions.append(position)

        elif is_dividend_transaction(transaction):
            position = open_positions.get(transaction.security.isin)
            if position is None:
                raise DanglingDividendError(transaction.security.isin)
            position.dividend_transactions.append(transaction)

        currency = transaction.value.currency
        balance = cash.get(currency)
        if balance is None:
            balance = CashPosition(value=Money.zero(currency))
            cash[currency] = balance
        balance.value = Money(currency=currency, amount=balance.value.amount + transaction.value.amount)
        balance.transactions.append(transaction)
        if transaction.value.amount > 0:
            balance.in_transactions.append(transaction)
        else:
            balance.out_transactions.append(transaction)

    logger.debug(
        "Aggregated %d transactions into %d open and %d closed positions",
        len(transactions),
        len(open_positions),
        len(closed_positions),
    )
    return Positions(
        transactions=transactions,
        security_positions=[*open_positions.values(), *closed_positions],
        cash_positions=list(cash.values()),
    )
