"""
Yahoo Finance market data provider via yfinance.

Tickers are Yahoo symbols (including venue suffixes such as ``.DE``), so the
exchange argument is informational. Yahoo reports split-adjusted closes;
unadjusted closes are reconstructed from the split history.
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_FLOOR

from portfolio_performance.core.exceptions import ValidationError
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

logger = logging.getLogger(__name__)

# Yahoo exchange codes -> venues
_YAHOO_EXCHANGES: dict[str, Exchange] = {
    "NMS": Exchange.NASDAQ,
    "NGM": Exchange.NASDAQ,
    "NCM": Exchange.NASDAQ,
    "NYQ": Exchange.NYSE,
    "LSE": Exchange.LONDON_STOCK_EXCHANGE,
    "GER": Exchange.XETRA,
    "FRA": Exchange.BORSE_FRANKFURT,
    "AMS": Exchange.EURONEXT_AMSTERDAM,
    "BRU": Exchange.EURONEXT_BRUSSELS,
    "PAR": Exchange.EURONEXT_PARIS,
    "MIL": Exchange.EURONEXT_MILAN,
    "EBS": Exchange.SIX_SWISS_EXCHANGE,
    "STO": Exchange.NASDAQ_STOCKHOLM,
    "HEL": Exchange.NASDAQ_HELSINKI,
    "CPH": Exchange.NASDAQ_COPENHAGEN,
    "TOR": Exchange.TORONTO_STOCK_EXCHANGE,
    "HKG": Exchange.HONG_KONG_EXCHANGE,
}

_INTERVALS = {Interval.DAY: "1d"}


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_minor_units(value) -> Decimal:
    return Decimal(str(value)) * 100


def _midnight(day: date) -> datetime:
    return UTC.localize(datetime(day.year, day.month, day.day))


def _frame_to_ohlc(frame, scale) -> dict[date, OHLC]:
    series: dict[date, OHLC] = {}
    for index, row in frame.iterrows():
        series[index.date()] = OHLC(
            open=scale(row["Open"]),
            high=scale(row["High"]),
            low=scale(row["Low"]),
            close=scale(row["Close"]),
        )
    return series


class YFinanceMarketDataProvider:
    """Fetches listings, closes, FX rates and splits from Yahoo Finance."""

    def __init__(self, max_lookback_days: int = 14, max_search_results: int = 5):
        self._max_lookback_days = max_lookback_days
        self._max_search_results = max_search_results

    # SearchProvider

    def search(self, term: str) -> list[SearchResultItem]:
        yf = _get_yf()
        quotes = yf.Search(term, max_results=self._max_search_results).quotes
        results = []
        for quote in quotes:
            symbol = quote.get("symbol")
            if not symbol:
                continue
            results.append(
                SearchResultItem(
                    name=quote.get("longname") or quote.get("shortname") or symbol,
                    exchange=_YAHOO_EXCHANGES.get(quote.get("exchange", ""), Exchange.OTC),
                    ticker=symbol,
                )
            )
        logger.debug("Search for %s returned %d listings", term, len(results))
        return results

    # HistoricalPriceProvider

    def get_at_close_by_ticker(
        self,
        exchange: Exchange,
        ticker: str,
        time: datetime,
        adjusted_for_splits: bool,
    ) -> PriceAtClose:
        day = to_utc(time).date()
        start = _midnight(day - timedelta(days=self._max_lookback_days))
        historical = self.get_historical_by_ticker(
            exchange, ticker, start, _midnight(day), Interval.DAY, adjusted_for_splits
        )
        found, ohlc = value_on_or_before(
            historical.prices, day, self._max_lookback_days, f"{ticker} price"
        )
        return PriceAtClose(
            currency=historical.currency,
            amount=int(ohlc.close.to_integral_value(rounding=ROUND_FLOOR)),
            time=_midnight(found),
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
        yf = _get_yf()
        yf_ticker = yf.Ticker(ticker)
        frame = yf_ticker.history(
            start=to_utc(start).date().isoformat(),
            # End is exclusive in yfinance
            end=(to_utc(end).date() + timedelta(days=1)).isoformat(),
            interval=_INTERVALS[interval],
            auto_adjust=False,
            actions=False,
        )
        metadata = yf_ticker.history_metadata or {}
        if "currency" not in metadata:
            raise ValidationError(f"No currency reported for ticker {ticker}")
        currency = Currency.from_code(metadata["currency"])

        prices = _frame_to_ohlc(frame, _to_minor_units)
        if not adjusted_for_splits:
            splits = self._splits_for(yf_ticker)
            for day, ohlc in list(prices.items()):
                factor = Decimal(1)
                for split in splits:
                    if split.time.date() > day:
                        factor *= split.split
                if factor != 1:
                    prices[day] = OHLC(
                        open=ohlc.open * factor,
                        high=ohlc.high * factor,
                        low=ohlc.low * factor,
                        close=ohlc.close * factor,
                    )
        return HistoricalPrices(currency=currency, prices=prices)

    # HistoricalFXProvider

    def get_exchange_rate_at_close(
        self,
        from_currency: Currency,
        to_currency: Currency,
        time: datetime,
    ) -> ExchangeRateAtClose:
        day = to_utc(time).date()
        start = _midnight(day - timedelta(days=self._max_lookback_days))
        rates = self.get_historical_exchange_rate(
            from_currency, to_currency, start, _midnight(day), Interval.DAY
        )
        found, ohlc = value_on_or_before(
            rates, day, self._max_lookback_days, f"{from_currency.value}/{to_currency.value} rate"
        )
        return ExchangeRateAtClose(time=_midnight(found), exchange_rate=ohlc.close)

    def get_historical_exchange_rate(
        self,
        from_currency: Currency,
        to_currency: Currency,
        start: datetime,
        end: datetime,
        interval: Interval,
    ) -> dict[date, OHLC]:
        yf = _get_yf()
        frame = yf.Ticker(f"{from_currency.value}{to_currency.value}=X").history(
            start=to_utc(start).date().isoformat(),
            end=(to_utc(end).date() + timedelta(days=1)).isoformat(),
            interval=_INTERVALS[interval],
            auto_adjust=False,
            actions=False,
        )
        return _frame_to_ohlc(frame, lambda value: Decimal(str(value)))

    # StockSplitProvider

    def get_stock_splits(
        self,
        start: datetime,
        end: datetime,
        exchange: Exchange,
        ticker: str,
    ) -> list[Split]:
        yf = _get_yf()
        return [
            split
            for split in self._splits_for(yf.Ticker(ticker))
            if to_utc(start) <= split.time <= to_utc(end)
        ]

    @staticmethod
    def _splits_for(yf_ticker) -> list[Split]:
        splits = []
        for index, ratio in yf_ticker.splits.items():
            splits.append(Split(time=to_utc(index.to_pydatetime()), split=Decimal(str(ratio))))
        splits.sort(key=lambda s: s.time)
        return splits
