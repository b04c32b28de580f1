"""Market data provider protocols and shared lookup helpers."""

from datetime import date, datetime, timedelta
from typing import Protocol, TypeVar

from portfolio_performance.core.exceptions import UnresolvableFXDateError
from portfolio_performance.domain.models import (
    Currency,
    Exchange,
    ExchangeRateAtClose,
    HistoricalPrices,
    Interval,
    OHLC,
    PriceAtClose,
    SearchResultItem,
    Split,
)

T = TypeVar("T")


class SearchProvider(Protocol):
    """Resolves free-text terms (such as ISINs) to listings."""

    def search(self, term: str) -> list[SearchResultItem]:
        """Return matching listings; the first result is the primary listing."""
        ...


class HistoricalPriceProvider(Protocol):
    """Historical closing prices by listing."""

    def get_at_close_by_ticker(
        self,
        exchange: Exchange,
        ticker: str,
        time: datetime,
        adjusted_for_splits: bool,
    ) -> PriceAtClose:
        """Closing price on the day of time, or the closest trading day before it."""
        ...

    def get_historical_by_ticker(
        self,
        exchange: Exchange,
        ticker: str,
        start: datetime,
        end: datetime,
        interval: Interval,
        adjusted_for_splits: bool,
    ) -> HistoricalPrices:
        """Daily OHLC series between start and end (inclusive)."""
        ...


class HistoricalFXProvider(Protocol):
    """Historical exchange rates."""

    def get_exchange_rate_at_close(
        self,
        from_currency: Currency,
        to_currency: Currency,
        time: datetime,
    ) -> ExchangeRateAtClose:
        """Closing rate on the day of time, or the closest day before it."""
        ...

    def get_historical_exchange_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        start: datetime,
        end: datetime,
        interval: Interval,
    ) -> dict[date, OHLC]:
        """Daily OHLC rate series between start and end (inclusive)."""
        ...


class StockSplitProvider(Protocol):
    """Stock split history by listing."""

    def get_stock_splits(
        self,
        start: datetime,
        end: datetime,
        exchange: Exchange,
        ticker: str,
    ) -> list[Split]:
        """Splits effective between start and end, oldest first."""
        ...


class MarketDataProvider(
    SearchProvider,
    HistoricalPriceProvider,
    HistoricalFXProvider,
    StockSplitProvider,
    Protocol,
):
    """A provider offering every market data capability."""


def value_on_or_before(
    series: dict[date, T],
    day: date,
    max_lookback_days: int,
    series_name: str = "series",
) -> tuple[date, T]:
    """
    Find the entry for day, walking backward one day at a time.

    Never looks at later days. Raises UnresolvableFXDateError when nothing is
    found within max_lookback_days.
    """
    candidate = day
    for _ in range(max_lookback_days + 1):
        value = series.get(candidate)
        if value is not None:
            return candidate, value
        candidate -= timedelta(days=1)
    raise UnresolvableFXDateError(series_name, day.isoformat(), max_lookback_days)
