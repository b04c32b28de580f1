"""Records exchanged with market data providers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from portfolio_performance.domain.models.enums import Exchange
from portfolio_performance.domain.models.money import Currency, OHLC


@dataclass(frozen=True)
class SearchResultItem:
    """A listing returned by a security search."""

    name: str
    exchange: Exchange
    ticker: str


@dataclass(frozen=True)
class PriceAtClose:
    """Closing price in minor units of the listing currency."""

    currency: Currency
    amount: int
    time: datetime


@dataclass(frozen=True)
class HistoricalPrices:
    """Daily OHLC series of a listing, in minor units of its currency."""

    currency: Currency
    prices: dict[date, OHLC] = field(default_factory=dict)


@dataclass(frozen=True)
class ExchangeRateAtClose:
    """Closing exchange rate and the day it was observed."""

    time: datetime
    exchange_rate: Decimal


@dataclass(frozen=True)
class Split:
    """Multiplicative share count adjustment effective at time."""

    time: datetime
    split: Decimal
