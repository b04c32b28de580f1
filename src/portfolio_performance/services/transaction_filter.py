"""Drop security positions whose recorded prices disagree with market data."""

import logging
from decimal import Decimal

from portfolio_performance.core.timezone import day_key
from portfolio_performance.domain.models import SecurityPosition, Transaction, is_security_transaction
from portfolio_performance.services.market_data_service import MarketDataService
from portfolio_performance.services.portfolio_engine import get_positions

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 0.10


def _position_is_plausible(
    position: SecurityPosition,
    market_data: MarketDataService,
    eps: Decimal,
) -> bool:
    for transaction in position.transactions:
        try:
            transaction_price = abs(Decimal(transaction.value.amount) / transaction.shares)
            closing_price = Decimal(
                market_data.resolve_price(
                    transaction.security.isin,
                    transaction.time,
                    transaction.value.currency,
                )
            )
            difference = (closing_price - transaction_price) / transaction_price
        except Exception:
            logger.warning(
                "Skipping position in %s: price check failed for %s",
                position.security.isin,
                day_key(transaction.time),
                exc_info=True,
            )
            return False

        logger.info(
            "Difference is %.2f%% for %s on %s",
            difference * 100,
            transaction.security.isin,
            day_key(transaction.time),
        )
        if abs(difference) > eps:
            logger.warning("Difference too large, skipping position in %s", position.security.isin)
            return False

    return True


def filter_transactions(
    transactions: list[Transaction],
    market_data: MarketDataService,
    eps: float = DEFAULT_EPSILON,
) -> list[Transaction]:
    """
    Keep cash transactions and every security position whose transactions
    all price within eps (relative) of the closing price on their day.

    A rejected position loses its security and dividend transactions. The
    result keeps the chronological order of the input.
    """
    if not transactions:
        return []

    eps = Decimal(str(eps))
    earliest = min(t.time for t in transactions)
    latest = max(t.time for t in transactions)
    positions = get_positions(earliest, latest, transactions)

    rejected_ids: set[int] = set()
    total = 0
    for position in positions.security_positions:
        total += len(position.transactions)
        if not _position_is_plausible(position, market_data, eps):
            rejected_ids.update(id(t) for t in position.transactions)
            rejected_ids.update(id(t) for t in position.dividend_transactions)

    kept = [t for t in transactions if id(t) not in rejected_ids]
    skipped = [t for t in transactions if id(t) in rejected_ids and is_security_transaction(t)]

    logger.info(
        "Skipped %d out of %d security transactions",
        len(skipped),
        total,
    )
    for transaction in skipped:
        logger.info(
            "Skipped %s on %s for %d %s",
            transaction.security.isin,
            day_key(transaction.time),
            transaction.value.amount // 100,
            transaction.value.currency.value,
        )

    return sorted(kept, key=lambda t: t.time)
