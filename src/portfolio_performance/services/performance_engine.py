"""
Performance engines: value a ledger window and split P/L into realised and
unrealised parts under a cost basis method.

Money is accumulated as Decimal in minor units of the target currency and
rounded half-even to integers once, when the Performance is built. Exchange
rates apply at each transaction's own date, except for cash balances and
remaining shares which are valued at the window end.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Union

from portfolio_performance.core.exceptions import LotMatchingError, ValidationError
from portfolio_performance.core.timezone import to_utc
from portfolio_performance.domain.models import (
    CostBasisMethod,
    Currency,
    Money,
    Performance,
    PositionPerformance,
    SecurityPosition,
    SecurityTransaction,
    Transaction,
)
from portfolio_performance.services.market_data_service import MarketDataService
from portfolio_performance.services.portfolio_engine import get_positions
from portfolio_performance.services.split_corrector import get_stock_split_corrected_transactions

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


def to_money(currency: Currency, amount: Decimal) -> Money:
    """Round a Decimal minor-unit amount half-even into Money."""
    return Money(currency=currency, amount=int(amount.quantize(Decimal(1), rounding=ROUND_HALF_EVEN)))


@dataclass
class _PositionFigures:
    total_price: Decimal = ZERO
    total_value: Decimal = ZERO
    realised_pl: Decimal = ZERO
    unrealised_pl: Decimal = ZERO


@dataclass
class _Lot:
    transaction: SecurityTransaction
    remaining: Decimal

    @property
    def price_per_share(self) -> Decimal:
        return Decimal(-self.transaction.value.amount) / self.transaction.shares


class PerformanceEngine(ABC):
    """
    Shared valuation of cash and dividends; subclasses value security positions.

    Short positions (negative shares) are skipped. Only cash held in the
    target currency is listed as an open position; foreign cash still counts
    towards total_value.
    """

    method: CostBasisMethod

    def __init__(self, market_data: MarketDataService):
        self._market_data = market_data

    def get_performance(
        self,
        transactions: list[Transaction],
        start: datetime,
        end: datetime,
        currency: Currency,
    ) -> Performance:
        start = to_utc(start)
        end = to_utc(end)
        positions = get_positions(start, end, self._prepare_transactions(transactions, end))

        total_value = ZERO
        unrealised_pl = ZERO
        realised_pl = ZERO
        open_positions: list[PositionPerformance] = []
        closed_positions: list[PositionPerformance] = []

        for cash_position in positions.cash_positions:
            rate = self._rate(cash_position.value.currency, currency, end)
            total_value += Decimal(cash_position.value.amount) * rate
            if cash_position.value.currency == currency:
                open_positions.append(
                    PositionPerformance(
                        position=cash_position,
                        total_price=cash_position.value,
                        total_value=cash_position.value,
                        realised_pl=Money.zero(currency),
                        unrealised_pl=Money.zero(currency),
                    )
                )

        for security_position in positions.security_positions:
            dividends = ZERO
            for dividend in security_position.dividend_transactions:
                rate = self._rate(dividend.value.currency, currency, dividend.time)
                dividends += Decimal(dividend.value.amount) * rate
            realised_pl += dividends

            if security_position.shares < 0:
                logger.debug("Skipping short position in %s", security_position.security.isin)
                continue

            figures = self._evaluate_position(security_position, end, currency)
            realised_pl += figures.realised_pl
            figures.realised_pl += dividends

            if security_position.shares > 0:
                total_value += figures.total_value
                unrealised_pl += figures.unrealised_pl
                open_positions.append(
                    PositionPerformance(
                        position=security_position,
                        total_price=to_money(currency, figures.total_price),
                        total_value=to_money(currency, figures.total_value),
                        realised_pl=to_money(currency, figures.realised_pl),
                        unrealised_pl=to_money(currency, figures.unrealised_pl),
                    )
                )
            else:
                closed_positions.append(
                    PositionPerformance(
                        position=security_position,
                        total_price=to_money(currency, figures.total_price),
                        total_value=Money.zero(currency),
                        realised_pl=to_money(currency, figures.realised_pl),
                        unrealised_pl=Money.zero(currency),
                    )
                )

        return Performance(
            total_value=to_money(currency, total_value),
            unrealised_pl=to_money(currency, unrealised_pl),
            realised_pl=to_money(currency, realised_pl),
            open_positions=open_positions,
            closed_positions=closed_positions,
        )

    def _prepare_transactions(self, transactions: list[Transaction], end: datetime) -> list[Transaction]:
        return transactions

    @abstractmethod
    def _evaluate_position(
        self,
        position: SecurityPosition,
        end: datetime,
        currency: Currency,
    ) -> _PositionFigures:
        """Cost, value and trading P/L of a long or closed position."""

    def _rate(self, from_currency: Currency, to_currency: Currency, time: datetime) -> Decimal:
        return self._market_data.resolve_exchange_rate(from_currency, to_currency, time)

    def _amount_in(self, transaction: Transaction, currency: Currency) -> Decimal:
        """Transaction amount converted at the rate of its own date."""
        rate = self._rate(transaction.value.currency, currency, transaction.time)
        return Decimal(transaction.value.amount) * rate

    def _end_price(self, position: SecurityPosition, end: datetime, currency: Currency) -> Decimal:
        return Decimal(self._market_data.resolve_price(position.security.isin, end, currency))


class _LotMatchingPerformanceEngine(PerformanceEngine):
    """Matches every sale against purchase lots in the order given by _order_lots."""

    @abstractmethod
    def _order_lots(self, lots: list[_Lot]) -> list[_Lot]:
        ...

    def _evaluate_position(
        self,
        position: SecurityPosition,
        end: datetime,
        currency: Currency,
    ) -> _PositionFigures:
        figures = _PositionFigures()
        isin = position.security.isin
        lots = deque(
            self._order_lots(
                [_Lot(t, t.shares) for t in position.out_transactions if t.shares > 0]
            )
        )

        for sale in position.in_transactions:
            to_match = -sale.shares
            cost = ZERO
            while to_match > 0:
                if not lots:
                    raise LotMatchingError(isin, str(to_match))
                lot = lots[0]
                used = min(lot.remaining, to_match)
                rate = self._rate(lot.transaction.value.currency, currency, lot.transaction.time)
                cost += used * lot.price_per_share * rate
                lot.remaining -= used
                to_match -= used
                if lot.remaining == 0:
                    lots.popleft()
            figures.realised_pl += self._amount_in(sale, currency) - cost

        if position.shares > 0:
            price = self._end_price(position, end, currency)
            for lot in lots:
                rate = self._rate(lot.transaction.value.currency, currency, lot.transaction.time)
                lot_cost = lot.price_per_share * lot.remaining * rate
                lot_value = price * lot.remaining
                figures.total_price += lot_cost
                figures.total_value += lot_value
                figures.unrealised_pl += lot_value - lot_cost

        return figures


class FIFOPerformanceEngine(_LotMatchingPerformanceEngine):
    """First in, first out: sales consume the oldest purchases first."""

    method = CostBasisMethod.FIFO

    def _order_lots(self, lots: list[_Lot]) -> list[_Lot]:
        return lots


class LIFOPerformanceEngine(_LotMatchingPerformanceEngine):
    """Last in, first out: sales consume the newest purchases first."""

    method = CostBasisMethod.LIFO

    def _order_lots(self, lots: list[_Lot]) -> list[_Lot]:
        return list(reversed(lots))


class WACPerformanceEngine(PerformanceEngine):
    """
    Weighted average cost: every share carries the mean purchase cost.

    Transactions are restated in post-split units first, so purchases made
    before a split average correctly against later ones.
    """

    method = CostBasisMethod.WAC

    def _prepare_transactions(self, transactions: list[Transaction], end: datetime) -> list[Transaction]:
        return get_stock_split_corrected_transactions(transactions, end, self._market_data)

    def _evaluate_position(
        self,
        position: SecurityPosition,
        end: datetime,
        currency: Currency,
    ) -> _PositionFigures:
        figures = _PositionFigures()

        cost = ZERO
        bought_shares = ZERO
        for purchase in position.out_transactions:
            cost -= self._amount_in(purchase, currency)
            bought_shares += purchase.shares
        average_cost = cost / bought_shares if bought_shares != 0 else ZERO

        for sale in position.in_transactions:
            figures.realised_pl += self._amount_in(sale, currency) + sale.shares * average_cost

        figures.total_price = position.shares * average_cost
        if position.shares > 0:
            price = self._end_price(position, end, currency)
            figures.total_value = position.shares * price
            figures.unrealised_pl = figures.total_value - figures.total_price

        return figures


_ENGINES: dict[CostBasisMethod, type[PerformanceEngine]] = {
    CostBasisMethod.FIFO: FIFOPerformanceEngine,
    CostBasisMethod.LIFO: LIFOPerformanceEngine,
    CostBasisMethod.WAC: WACPerformanceEngine,
}


def get_performance_engine(
    method: Union[CostBasisMethod, str],
    market_data: MarketDataService,
) -> PerformanceEngine:
    """Build the engine for a cost basis method (enum member or its value)."""
    try:
        method = CostBasisMethod(method)
    except ValueError:
        raise ValidationError(f"Unknown cost basis method: {method}") from None
    return _ENGINES[method](market_data)
