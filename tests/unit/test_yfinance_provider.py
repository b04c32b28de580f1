"""
Unit tests for YFinanceMarketDataProvider against a fake yfinance module.

Tests cover:
- Search result mapping to venues
- Closes in minor units, unadjusted for later splits
- Backward lookup of closes and rates
- Missing currency metadata
- Entry points of the installed library
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from portfolio_performance.core.exceptions import ValidationError
from portfolio_performance.core.timezone import UTC
from portfolio_performance.domain.models import Currency, Exchange
from portfolio_performance.providers import yfinance_provider
from portfolio_performance.providers.yfinance_provider import YFinanceMarketDataProvider

from tests.conftest import utc_datetime


class FakeTimestamp(datetime):
    """datetime with the pandas Timestamp accessor the provider uses."""

    def to_pydatetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, tzinfo=self.tzinfo)


class FakeFrame:
    """Minimal stand-in for a yfinance history DataFrame."""

    def __init__(self, closes: dict):
        self._closes = closes

    def iterrows(self):
        for day, close in sorted(self._closes.items()):
            row = {"Open": close, "High": close, "Low": close, "Close": close}
            yield FakeTimestamp(day.year, day.month, day.day), row


class FakeSplits:
    def __init__(self, splits: dict):
        self._splits = splits

    def items(self):
        for day, ratio in self._splits.items():
            yield FakeTimestamp(day.year, day.month, day.day, tzinfo=UTC), ratio


class FakeTicker:
    def __init__(self, closes, currency, splits=None):
        self._closes = closes
        self.history_metadata = {"currency": currency} if currency else {}
        self.splits = FakeSplits(splits or {})
        self.requests = []

    def history(self, start, end, interval, auto_adjust, actions):
        self.requests.append((start, end, interval))
        return FakeFrame(
            {day: close for day, close in self._closes.items() if start <= day.isoformat() < end}
        )


class FakeSearch:
    def __init__(self, quotes):
        self.quotes = quotes


class FakeYFinance:
    def __init__(self, tickers=None, quotes=None):
        self._tickers = tickers or {}
        self._quotes = quotes or []

    def Ticker(self, symbol):
        return self._tickers[symbol]

    def Search(self, term, max_results):
        return FakeSearch(self._quotes[:max_results])


@pytest.fixture
def install_fake(monkeypatch):
    def _install(fake: FakeYFinance) -> None:
        monkeypatch.setattr(yfinance_provider, "_get_yf", lambda: fake)

    return _install


class TestSearch:
    """Tests for listing search."""

    def test_quotes_mapped_to_listings(self, install_fake):
        """
        GIVEN Yahoo quotes on NASDAQ and an unknown venue
        WHEN an ISIN is searched
        THEN listings keep order with mapped venues
        """
        install_fake(
            FakeYFinance(
                quotes=[
                    {"symbol": "AAPL", "exchange": "NMS", "longname": "Apple Inc."},
                    {"symbol": "APC.F", "exchange": "XXX", "shortname": "APPLE"},
                    {"exchange": "NMS"},
                ]
            )
        )

        results = YFinanceMarketDataProvider().search("US0378331005")

        assert [(r.ticker, r.exchange) for r in results] == [
            ("AAPL", Exchange.NASDAQ),
            ("APC.F", Exchange.OTC),
        ]
        assert results[0].name == "Apple Inc."


class TestPrices:
    """Tests for closing prices."""

    def test_close_in_minor_units_unadjusted(self, install_fake):
        """
        GIVEN a split-adjusted close of 50.25 before a 2:1 split
        WHEN the unadjusted close is requested
        THEN 100.50 is returned in minor units
        """
        ticker = FakeTicker(
            {date(2020, 1, 3): 50.25},
            "USD",
            splits={date(2020, 2, 1): 2.0},
        )
        install_fake(FakeYFinance(tickers={"AAPL": ticker}))

        price = YFinanceMarketDataProvider().get_at_close_by_ticker(
            Exchange.NASDAQ, "AAPL", utc_datetime(2020, 1, 5), False
        )

        assert price.amount == 100_50
        assert price.currency == Currency.USD
        assert price.time == utc_datetime(2020, 1, 3)

    def test_pence_currency(self, install_fake):
        """
        GIVEN a London listing quoted in GBp
        WHEN a close is requested
        THEN the currency is GBX
        """
        ticker = FakeTicker({date(2020, 1, 3): 1234.5}, "GBp")
        install_fake(FakeYFinance(tickers={"VOD.L": ticker}))

        price = YFinanceMarketDataProvider().get_at_close_by_ticker(
            Exchange.LONDON_STOCK_EXCHANGE, "VOD.L", utc_datetime(2020, 1, 3), True
        )

        assert price.currency == Currency.GBX
        assert price.amount == 1234_50

    def test_missing_currency_raises(self, install_fake):
        """
        GIVEN history without currency metadata
        WHEN a close is requested
        THEN ValidationError is raised
        """
        ticker = FakeTicker({date(2020, 1, 3): 10.0}, None)
        install_fake(FakeYFinance(tickers={"XXX": ticker}))

        with pytest.raises(ValidationError):
            YFinanceMarketDataProvider().get_at_close_by_ticker(
                Exchange.OTC, "XXX", utc_datetime(2020, 1, 3), True
            )


class TestExchangeRates:
    """Tests for FX rates."""

    def test_rate_walks_back_to_friday(self, install_fake):
        """
        GIVEN a EURUSD=X close on Friday only
        WHEN the Sunday rate is requested
        THEN the Friday close is returned
        """
        fx = FakeTicker({date(2020, 1, 3): 1.1172}, "USD")
        install_fake(FakeYFinance(tickers={"EURUSD=X": fx}))

        rate = YFinanceMarketDataProvider().get_exchange_rate_at_close(
            Currency.EUR, Currency.USD, utc_datetime(2020, 1, 5)
        )

        assert rate.exchange_rate == Decimal("1.1172")
        assert rate.time == utc_datetime(2020, 1, 3)


class TestSplits:
    """Tests for stock splits."""

    def test_splits_filtered_to_range(self, install_fake):
        """
        GIVEN splits in 2014 and 2020
        WHEN splits for 2020 are requested
        THEN only the 2020 split is returned
        """
        ticker = FakeTicker({}, "USD", splits={date(2014, 6, 9): 7.0, date(2020, 8, 31): 4.0})
        install_fake(FakeYFinance(tickers={"AAPL": ticker}))

        splits = YFinanceMarketDataProvider().get_stock_splits(
            utc_datetime(2020, 1, 1), utc_datetime(2020, 12, 31), Exchange.NASDAQ, "AAPL"
        )

        assert [s.split for s in splits] == [Decimal("4.0")]
        assert splits[0].time == utc_datetime(2020, 8, 31)


class TestInstalledLibrary:
    """Tests against the installed yfinance distribution."""

    def test_exports_search_and_ticker(self):
        """
        GIVEN the yfinance release resolved from the declared dependency
        WHEN its public API is inspected
        THEN the Search and Ticker entry points used by the provider exist
        """
        yf = pytest.importorskip("yfinance")

        assert hasattr(yf, "Search")
        assert hasattr(yf, "Ticker")
