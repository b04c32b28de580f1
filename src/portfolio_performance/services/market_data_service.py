"""
Market data service: cache-memoised prices, exchange rates and stock splits.

Lookups hit external providers over the network and are repeated for every
performance calculation, so every result is written to the cache under a
deterministic key derived from the identifier, currency and UTC day.
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from portfolio_performance.core.exceptions import InvalidCachedPriceError, TickerNotFoundError
from portfolio_performance.core.timezone import (
    day_key,
    now_utc,
    parse_datetime_utc,
    start_of_utc_day,
    to_utc,
)
from portfolio_performance.domain.models import Currency, Exchange, Split
from portfolio_performance.providers.market_data_provider import MarketDataProvider
from portfolio_performance.repositories.protocols import Cache

logger = logging.getLogger(__name__)

DEFAULT_TICKER_TTL_SECONDS = 365 * 24 * 60 * 60
DEFAULT_STOCK_SPLIT_TTL_SECONDS = 24 * 60 * 60


def exchange_ticker_cache_key(isin: str) -> str:
    return f"exchangeTicker/{isin}"


def exchange_rate_cache_key(from_currency: Currency, to_currency: Currency, time: datetime) -> str:
    return f"exchangeRate/{from_currency.value}/{to_currency.value}/{day_key(time)}"


def price_cache_key(isin: str, currency: Currency, time: datetime) -> str:
    return f"price/{isin}/{currency.value}/{day_key(time)}"


def stock_splits_cache_key(isin: str, start: datetime) -> str:
    return f"stockSplits/{isin}/{day_key(start)}"


def validated_price(key: str, value: Decimal) -> int:
    """Floor a price to integer minor units, rejecting negative or non-finite values."""
    if not value.is_finite() or value < 0:
        raise InvalidCachedPriceError(key, value)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


class MarketDataService:
    """
    Resolves historical prices, exchange rates and splits through a cache.

    Cache lifetimes: listing lookups one year (an ISIN may move to another
    ticker), prices and exchange rates forever (history does not change),
    stock splits one day (a split may be announced for the next day).
    Provider errors propagate and nothing is cached for them.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache: Cache,
        ticker_ttl_seconds: int = DEFAULT_TICKER_TTL_SECONDS,
        stock_split_ttl_seconds: int = DEFAULT_STOCK_SPLIT_TTL_SECONDS,
        split_horizon: Optional[datetime] = None,
    ):
        self._provider = provider
        self._cache = cache
        self._ticker_ttl = ticker_ttl_seconds
        self._stock_split_ttl = stock_split_ttl_seconds
        # Upper bound of every split query, shared by all windows
        self._split_horizon = to_utc(split_horizon) if split_horizon else now_utc()

    @property
    def provider(self) -> MarketDataProvider:
        return self._provider

    @property
    def cache(self) -> Cache:
        return self._cache

    def get_main_listing(self, isin: str) -> tuple[Exchange, str]:
        """Return (exchange, ticker) of the primary listing of isin."""
        key = exchange_ticker_cache_key(isin)
        cached = self._cache.get(key)
        if cached is not None:
            exchange, ticker = cached
            return Exchange(exchange), ticker

        results = self._provider.search(isin)
        if not results:
            raise TickerNotFoundError(isin)

        main = results[0]
        logger.debug("Resolved %s to %s:%s", isin, main.exchange.value, main.ticker)
        self._cache.put(key, [main.exchange.value, main.ticker], self._ticker_ttl)
        return main.exchange, main.ticker

    def resolve_exchange_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        time: datetime,
    ) -> Decimal:
        """Closing rate converting from_currency into to_currency on the day of time."""
        if from_currency == to_currency:
            return Decimal(1)

        key = exchange_rate_cache_key(from_currency, to_currency, time)
        cached = self._cache.get(key)
        if cached is not None:
            return Decimal(str(cached))

        logger.debug("Cache miss for %s", key)
        exchange_rate = self._provider.get_exchange_rate_at_close(
            from_currency, to_currency, time
        ).exchange_rate
        self._cache.put(key, str(exchange_rate))
        return exchange_rate

    def resolve_price(self, isin: str, time: datetime, currency: Currency) -> int:
        """Closing price of isin on the day of time, in minor units of currency."""
        key = price_cache_key(isin, currency, time)
        cached = self._cache.get(key)
        if cached is not None:
            return int(cached)

        logger.debug("Cache miss for %s", key)
        exchange, ticker = self.get_main_listing(isin)
        price = self._provider.get_at_close_by_ticker(exchange, ticker, time, False)
        exchange_rate = self.resolve_exchange_rate(price.currency, currency, time)

        amount = validated_price(key, Decimal(price.amount) * exchange_rate)
        self._cache.put(key, amount)
        return amount

    def store_price(self, isin: str, time: datetime, currency: Currency, value: Decimal) -> int:
        """Write an externally obtained price to the cache under its price key."""
        key = price_cache_key(isin, currency, time)
        amount = validated_price(key, value)
        self._cache.put(key, amount)
        return amount

    def resolve_stock_splits(self, isin: str, start: datetime, end: datetime) -> list[Split]:
        """Splits of isin effective between start and end, oldest first."""
        start = to_utc(start)
        end = to_utc(end)
        key = stock_splits_cache_key(isin, start)
        cached = self._cache.get(key)
        if cached is not None:
            splits = [
                Split(time=parse_datetime_utc(item["time"]), split=Decimal(str(item["split"])))
                for item in cached
            ]
        else:
            logger.debug("Cache miss for %s", key)
            exchange, ticker = self.get_main_listing(isin)
            horizon = max(self._split_horizon, end)
            # The key covers the whole start day
            splits = self._provider.get_stock_splits(start_of_utc_day(start), horizon, exchange, ticker)
            self._cache.put(
                key,
                [{"time": s.time.isoformat(), "split": str(s.split)} for s in splits],
                self._stock_split_ttl,
            )

        return sorted(
            (s for s in splits if start <= s.time <= end),
            key=lambda s: s.time,
        )
