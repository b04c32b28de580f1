"""
Unit tests for stock split correction.

Tests cover:
- Scaling of shares and amounts before a split
- Transactions after a split left untouched
- Cumulative splits
- Securities first traded at or after the cut-off
- Non-mutation of the input ledger
"""

from decimal import Decimal

from portfolio_performance.domain.models import Exchange
from portfolio_performance.services import get_stock_split_corrected_transactions

from tests.conftest import (
    APPLE_ISIN,
    APPLE_TICKER,
    buy,
    cash,
    utc_datetime,
)


class TestSplitCorrection:
    """Tests for get_stock_split_corrected_transactions."""

    def test_transaction_before_split_is_scaled(self, market_data, stub_provider):
        """
        GIVEN a purchase of 3 shares for 100.01 before a 2:1 split
        WHEN transactions are corrected
        THEN shares and amount are doubled
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 2, 1), Decimal(2))
        ledger = [buy(APPLE_ISIN, 3, 100_01, utc_datetime(2020, 1, 2))]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert corrected[0].shares == Decimal(6)
        assert corrected[0].value.amount == -200_02

    def test_fractional_ratio_floors_amount(self, market_data, stub_provider):
        """
        GIVEN a purchase for 100.01 before a 1:2 reverse split
        WHEN transactions are corrected
        THEN the halved amount is floored
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 2, 1), Decimal("0.5"))
        ledger = [buy(APPLE_ISIN, 4, 100_01, utc_datetime(2020, 1, 2))]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert corrected[0].shares == Decimal(2)
        assert corrected[0].value.amount == -50_01

    def test_transaction_after_split_is_untouched(self, market_data, stub_provider):
        """
        GIVEN purchases before and after a split
        WHEN transactions are corrected
        THEN only the earlier purchase is scaled
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 2, 1), Decimal(4))
        ledger = [
            buy(APPLE_ISIN, 1, 100_00, utc_datetime(2020, 1, 2)),
            buy(APPLE_ISIN, 1, 25_00, utc_datetime(2020, 3, 2)),
        ]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert [t.shares for t in corrected] == [Decimal(4), Decimal(1)]

    def test_splits_compound(self, market_data, stub_provider):
        """
        GIVEN two 2:1 splits after a purchase
        WHEN transactions are corrected
        THEN shares are quadrupled
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 2, 1), Decimal(2))
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 4, 1), Decimal(2))
        ledger = [buy(APPLE_ISIN, 1, 100_00, utc_datetime(2020, 1, 2))]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert corrected[0].shares == Decimal(4)

    def test_split_after_cutoff_is_ignored(self, market_data, stub_provider):
        """
        GIVEN a split after the cut-off time
        WHEN transactions are corrected
        THEN nothing changes
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 8, 1), Decimal(2))
        ledger = [buy(APPLE_ISIN, 1, 100_00, utc_datetime(2020, 1, 2))]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert corrected[0].shares == Decimal(1)

    def test_security_first_traded_after_cutoff_skips_lookup(self, market_data, stub_provider):
        """
        GIVEN a security first bought after the cut-off
        WHEN transactions are corrected
        THEN no split lookup is made
        """
        ledger = [buy(APPLE_ISIN, 1, 100_00, utc_datetime(2020, 7, 2))]

        get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert stub_provider.calls["get_stock_splits"] == 0

    def test_input_is_not_mutated(self, market_data, stub_provider):
        """
        GIVEN a ledger with cash and a purchase before a split
        WHEN transactions are corrected
        THEN the original objects are unchanged and copies are returned
        """
        stub_provider.add_split(Exchange.NASDAQ, APPLE_TICKER, utc_datetime(2020, 2, 1), Decimal(2))
        ledger = [
            cash(100_00, utc_datetime(2020, 1, 1)),
            buy(APPLE_ISIN, 1, 100_00, utc_datetime(2020, 1, 2)),
        ]

        corrected = get_stock_split_corrected_transactions(ledger, utc_datetime(2020, 6, 1), market_data)

        assert ledger[1].shares == Decimal(1)
        assert ledger[1].value.amount == -100_00
        assert corrected[1] is not ledger[1]
        assert corrected[0].value == ledger[0].value
