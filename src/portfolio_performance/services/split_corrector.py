"""Restate historical security transactions in post-split share units."""

import copy
import logging
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR

from portfolio_performance.core.timezone import to_utc
from portfolio_performance.domain.models import (
    Money,
    SecurityTransaction,
    Transaction,
    is_security_transaction,
)
from portfolio_performance.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)


def get_stock_split_corrected_transactions(
    transactions: list[Transaction],
    until: datetime,
    market_data: MarketDataService,
) -> list[Transaction]:
    """
    Return a corrected copy of transactions; the input is left untouched.

    Every security transaction executed on or before a split is scaled by the
    split ratio, both its shares and its value amount (floored to minor units).
    Securities whose first transaction is not before until are left as is.
    """
    until = to_utc(until)
    corrected = copy.deepcopy(transactions)

    by_isin: dict[str, list[SecurityTransaction]] = {}
    for transaction in corrected:
        if not is_security_transaction(transaction):
            continue
        by_isin.setdefault(transaction.security.isin, []).append(transaction)

    for isin, security_transactions in by_isin.items():
        earliest = min(t.time for t in security_transactions)
        if earliest >= until:
            continue

        splits = market_data.resolve_stock_splits(isin, earliest, until)
        if splits:
            logger.debug("Applying %d split(s) to %s", len(splits), isin)

        for split in splits:
            for transaction in security_transactions:
                if transaction.time > split.time:
                    continue
                transaction.shares = transaction.shares * split.split
                scaled = Decimal(transaction.value.amount) * split.split
                transaction.value = Money(
                    currency=transaction.value.currency,
                    amount=int(scaled.to_integral_value(rounding=ROUND_FLOOR)),
                )

    return corrected
