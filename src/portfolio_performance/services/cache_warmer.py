"""
Bulk pre-population of the price cache.

Resolving one closing price at a time costs a provider round trip per day.
Fetching each security's history once and writing every day under its price
key lets later performance calculations run from the cache alone.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_performance.core.timezone import UTC, now_utc, to_utc
from portfolio_performance.domain.models import Currency, Interval, Transaction, is_security_transaction
from portfolio_performance.providers.market_data_provider import value_on_or_before
from portfolio_performance.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOOKBACK_DAYS = 14


def warm_isin_price_cache(
    isin: str,
    start: datetime,
    end: datetime,
    currency: Currency,
    market_data: MarketDataService,
    max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
) -> int:
    """Cache daily closes of isin between start and end; returns the count written."""
    provider = market_data.provider
    exchange, ticker = market_data.get_main_listing(isin)
    historical = provider.get_historical_by_ticker(exchange, ticker, start, end, Interval.DAY, False)

    rates = None
    if historical.currency != currency:
        rates = provider.get_historical_exchange_rate(
            historical.currency, currency, start, end, Interval.DAY
        )

    written = 0
    for day, ohlc in sorted(historical.prices.items()):
        value = ohlc.close
        if rates is not None:
            _, rate = value_on_or_before(
                rates,
                day,
                max_lookback_days,
                f"{historical.currency.value}/{currency.value} rate",
            )
            value = value * rate.close
        time = UTC.localize(datetime(day.year, day.month, day.day))
        market_data.store_price(isin, time, currency, Decimal(value))
        written += 1

    logger.debug("Warmed %d prices for %s in %s", written, isin, currency.value)
    return written


def warm_price_cache(
    transactions: list[Transaction],
    currency: Currency,
    market_data: MarketDataService,
    until: Optional[datetime] = None,
    max_lookback_days: int = DEFAULT_MAX_LOOKBACK_DAYS,
) -> int:
    """
    Cache daily closes for every security in transactions, from its first
    transaction up to until (defaults to now).
    """
    until = to_utc(until) if until else now_utc()

    earliest: dict[str, datetime] = {}
    for transaction in transactions:
        if not is_security_transaction(transaction):
            continue
        isin = transaction.security.isin
        if isin not in earliest or transaction.time < earliest[isin]:
            earliest[isin] = transaction.time

    written = 0
    for isin, start in earliest.items():
        if start > until:
            continue
        written += warm_isin_price_cache(isin, start, until, currency, market_data, max_lookback_days)

    logger.info("Warmed price cache with %d entries for %d securities", written, len(earliest))
    return written
