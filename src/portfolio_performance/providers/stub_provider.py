"""Stub market data provider for offline/testing use."""

from collections import Counter
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from portfolio_performance.core.timezone import UTC, to_utc
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
from portfolio_performance.providers.market_data_provider import value_on_or_before


# Deterministic listings and constant closes (minor units) for common securities
_STUB_LISTINGS: dict[str, SearchResultItem] = {
    "US0378331005": SearchResultItem(name="Apple Inc.", exchange=Exchange.NASDAQ, ticker="AAPL"),
    "US5949181045": SearchResultItem(name="Microsoft Corp.", exchange=Exchange.NASDAQ, ticker="MSFT"),
    "US02079K3059": SearchResultItem(name="Alphabet Inc.", exchange=Exchange.NASDAQ, ticker="GOOGL"),
    "US88160R1014": SearchResultItem(name="Tesla Inc.", exchange=Exchange.NASDAQ, ticker="TSLA"),
    "IE00B4L5Y983": SearchResultItem(name="iShares Core MSCI World", exchange=Exchange.XETRA, ticker="EUNL"),
}

_STUB_CLOSES: dict[tuple[Exchange, str], tuple[Currency, int]] = {
    (Exchange.NASDAQ, "AAPL"): (Currency.USD, 185_50),
    (Exchange.NASDAQ, "MSFT"): (Currency.USD, 378_25),
    (Exchange.NASDAQ, "GOOGL"): (Currency.USD, 142_75),
    (Exchange.NASDAQ, "TSLA"): (Currency.USD, 248_75),
    (Exchange.XETRA, "EUNL"): (Currency.EUR, 92_40),
}

_STUB_RATES: dict[tuple[Currency, Currency], Decimal] = {
    (Currency.EUR, Currency.USD): Decimal("1.10"),
    (Currency.GBP, Currency.USD): Decimal("1.27"),
    (Currency.USD, Currency.JPY): Decimal("150.00"),
}


def _midnight(day: date) -> datetime:
    return UTC.localize(datetime(day.year, day.month, day.day))


def _days(start: datetime, end: datetime) -> list[date]:
    first = to_utc(start).date()
    last = to_utc(end).date()
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def _flat(value: Decimal) -> OHLC:
    return OHLC(open=value, high=value, low=value, close=value)


class StubMarketDataProvider:
    """
    Stub provider with deterministic data for offline operation.

    Serves explicitly registered data first and falls back to constant
    prices and rates for a handful of well-known securities. Every call is
    counted in ``calls`` so callers can observe caching.
    """

    def __init__(self, max_lookback_days: int = 14, use_defaults: bool = True):
        self._max_lookback_days = max_lookback_days
        self._use_defaults = use_defaults
        self._listings: dict[str, list[SearchResultItem]] = {}
        self._currencies: dict[tuple[Exchange, str], Currency] = {}
        self._closes: dict[tuple[Exchange, str], dict[date, Decimal]] = {}
        self._rates: dict[tuple[Currency, Currency], dict[date, Decimal]] = {}
        self._splits: dict[tuple[Exchange, str], list[Split]] = {}
        self.calls: Counter = Counter()

    # Registration helpers

    def add_listing(self, isin: str, exchange: Exchange, ticker: str, name: Optional[str] = None) -> None:
        self._listings.setdefault(isin, []).append(
            SearchResultItem(name=name or ticker, exchange=exchange, ticker=ticker)
        )

    def add_close(self, exchange: Exchange, ticker: str, currency: Currency, day: date, amount: int) -> None:
        """Register an unadjusted close in minor units."""
        self._currencies[(exchange, ticker)] = currency
        self._closes.setdefault((exchange, ticker), {})[day] = Decimal(amount)

    def add_exchange_rate(self, from_currency: Currency, to_currency: Currency, day: date, rate: Decimal) -> None:
        self._rates.setdefault((from_currency, to_currency), {})[day] = Decimal(rate)

    def add_split(self, exchange: Exchange, ticker: str, time: datetime, split: Decimal) -> None:
        splits = self._splits.setdefault((exchange, ticker), [])
        splits.append(Split(time=to_utc(time), split=Decimal(split)))
        splits.sort(key=lambda s: s.time)

    # SearchProvider

    def search(self, term: str) -> list[SearchResultItem]:
        self.calls["search"] += 1
        if term in self._listings:
            return list(self._listings[term])
        if self._use_defaults and term in _STUB_LISTINGS:
            return [_STUB_LISTINGS[term]]
        return []

    # HistoricalPriceProvider

    def get_at_close_by_ticker(
        self,
        exchange: Exchange,
        ticker: str,
        time: datetime,
        adjusted_for_splits: bool,
    ) -> PriceAtClose:
        self.calls["get_at_close_by_ticker"] += 1
        currency, series = self._price_series(exchange, ticker, [to_utc(time).date()])
        day, close = value_on_or_before(
            series, to_utc(time).date(), self._max_lookback_days, f"{exchange.value}:{ticker} price"
        )
        if adjusted_for_splits:
            close = close / self._split_factor_after(exchange, ticker, day)
        return PriceAtClose(
            currency=currency,
            amount=int(close.to_integral_value(rounding=ROUND_FLOOR)),
            time=_midnight(day),
        )

    def get_historical_by_ticker(
        self,
        exchange: Exchange,
        ticker: str,
        start: datetime,
        end: datetime,
        interval: Interval,
        adjusted_for_splits: bool,
    ) -> HistoricalPrices:
        self.calls["get_historical_by_ticker"] += 1
        days = _days(start, end)
        currency, series = self._price_series(exchange, ticker, days)
        prices: dict[date, OHLC] = {}
        for day in days:
            close = series.get(day)
            if close is None:
                continue
            if adjusted_for_splits:
                close = close / self._split_factor_after(exchange, ticker, day)
            prices[day] = _flat(close)
        return HistoricalPrices(currency=currency, prices=prices)

    # HistoricalFXProvider

    def get_exchange_rate_at_close(
        self,
        from_currency: Currency,
        to_currency: Currency,
        time: datetime,
    ) -> ExchangeRateAtClose:
        self.calls["get_exchange_rate_at_close"] += 1
        day = to_utc(time).date()
        series = self._rate_series(from_currency, to_currency, [day])
        found, rate = value_on_or_before(
            series, day, self._max_lookback_days, f"{from_currency.value}/{to_currency.value} rate"
        )
        return ExchangeRateAtClose(time=_midnight(found), exchange_rate=rate)

    def get_historical_exchange_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        start: datetime,
        end: datetime,
        interval: Interval,
    ) -> dict[date, OHLC]:
        self.calls["get_historical_exchange_rate"] += 1
        days = _days(start, end)
        series = self._rate_series(from_currency, to_currency, days)
        return {day: _flat(series[day]) for day in days if day in series}

    # StockSplitProvider

    def get_stock_splits(
        self,
        start: datetime,
        end: datetime,
        exchange: Exchange,
        ticker: str,
    ) -> list[Split]:
        self.calls["get_stock_splits"] += 1
        return [
            split
            for split in self._splits.get((exchange, ticker), [])
            if to_utc(start) <= split.time <= to_utc(end)
        ]

    # Internals

    def _price_series(
        self, exchange: Exchange, ticker: str, days: list[date]
    ) -> tuple[Currency, dict[date, Decimal]]:
        key = (exchange, ticker)
        if key in self._closes:
            return self._currencies[key], self._closes[key]
        if self._use_defaults and key in _STUB_CLOSES:
            currency, amount = _STUB_CLOSES[key]
            return currency, {day: Decimal(amount) for day in days}
        return Currency.USD, {}

    def _rate_series(
        self, from_currency: Currency, to_currency: Currency, days: list[date]
    ) -> dict[date, Decimal]:
        key = (from_currency, to_currency)
        if key in self._rates:
            return self._rates[key]
        if self._use_defaults:
            if key in _STUB_RATES:
                return {day: _STUB_RATES[key] for day in days}
            inverse = (to_currency, from_currency)
            if inverse in _STUB_RATES:
                return {day: 1 / _STUB_RATES[inverse] for day in days}
        return {}

    def _split_factor_after(self, exchange: Exchange, ticker: str, day: date) -> Decimal:
        factor = Decimal(1)
        for split in self._splits.get((exchange, ticker), []):
            if split.time.date() > day:
                factor *= split.split
        return factor
