"""Ledger preparation: filter faulty positions, correct splits, warm the cache."""

import logging
from datetime import datetime
from typing import Optional

from portfolio_performance.core.timezone import now_utc, to_utc
from portfolio_performance.domain.models import Currency, Transaction
from portfolio_performance.services.cache_warmer import DEFAULT_MAX_LOOKBACK_DAYS, warm_price_cache
from portfolio_performance.services.market_data_service import MarketDataService
from portfolio_performance.services.split_corrector import get_stock_split_corrected_transactions
from portfolio_performance.services.transaction_filter import DEFAULT_EPSILON, filter_transactions

logger = logging.getLogger(__name__)


def run_pipeline(
    transactions: list[Transaction],
    market_data: MarketDataService,
    currency: Currency,
    until: Optional[datetime] = None,
    eps: float = DEFAULT_EPSILON,
    correct_splits: bool = True,
    max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
) -> list[Transaction]:
    """
    Prepare a ledger for performance calculation.

    Returns the filtered transactions, split-corrected unless correct_splits
    is False. The WAC engine corrects splits itself, so its input should come
    from a run with correct_splits=False.
    """
    until = to_utc(until) if until else now_utc()

    filtered = filter_transactions(transactions, market_data, eps)
    logger.info("Kept %d of %d transactions", len(filtered), len(transactions))

    if correct_splits:
        prepared = get_stock_split_corrected_transactions(filtered, until, market_data)
    else:
        prepared = filtered

    warm_price_cache(prepared, currency, market_data, until, max_lookback_days)
    return prepared
