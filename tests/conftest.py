"""
Pytest configuration and fixtures for portfolio performance tests.

This module provides:
- UTC time helpers
- Factory helpers for cash, security and dividend transactions
- A deterministic stub market data provider with the Apple listing
- Cache and market data service fixtures
- Preset ledgers for the basic and varied-price portfolios
- In-memory SQLite fixtures and a FastAPI test client
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session

from portfolio_performance.main import app
from portfolio_performance.api.deps import get_market_data_service
from portfolio_performance.config.settings import reset_settings
from portfolio_performance.core.timezone import UTC
from portfolio_performance.domain.models import (
    CashTransaction,
    Currency,
    DividendTransaction,
    Exchange,
    Money,
    Security,
    SecurityTransaction,
    Transaction,
    is_cash_position,
    is_security_position,
)
from portfolio_performance.providers import StubMarketDataProvider
from portfolio_performance.repositories import InMemoryCache
from portfolio_performance.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from portfolio_performance.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_performance.services import MarketDataService


APPLE_ISIN = "US0378331005"
APPLE_TICKER = "AAPL"
MICROSOFT_ISIN = "US5949181045"
MICROSOFT_TICKER = "MSFT"
SAP_ISIN = "DE0007164600"
SAP_TICKER = "SAP"


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in UTC."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


# =============================================================================
# TRANSACTION HELPERS (exported for use in tests)
# =============================================================================


def cash(
    amount: int,
    time: datetime,
    currency: Currency = Currency.USD,
) -> CashTransaction:
    """Deposit (positive) or withdrawal (negative) in minor units."""
    return CashTransaction(time=time, value=Money(currency=currency, amount=amount))


def buy(
    isin: str,
    shares: Union[int, str, Decimal],
    amount: int,
    time: datetime,
    currency: Currency = Currency.USD,
) -> SecurityTransaction:
    """Purchase of shares for amount (minor units, positive number)."""
    return SecurityTransaction(
        time=time,
        value=Money(currency=currency, amount=-amount),
        security=Security(isin=isin),
        shares=Decimal(str(shares)),
    )


def sell(
    isin: str,
    shares: Union[int, str, Decimal],
    amount: int,
    time: datetime,
    currency: Currency = Currency.USD,
) -> SecurityTransaction:
    """Sale of shares for amount (minor units, positive number)."""
    return SecurityTransaction(
        time=time,
        value=Money(currency=currency, amount=amount),
        security=Security(isin=isin),
        shares=-Decimal(str(shares)),
    )


def dividend(
    isin: str,
    amount: int,
    time: datetime,
    currency: Currency = Currency.USD,
) -> DividendTransaction:
    """Dividend payout in minor units."""
    return DividendTransaction(
        time=time,
        value=Money(currency=currency, amount=amount),
        security=Security(isin=isin),
    )


def transaction_json(transaction: Transaction) -> dict:
    """Serialize a domain transaction to the API request format."""
    data = {
        "kind": transaction.kind.value,
        "time": transaction.time.isoformat(),
        "value": {
            "currency": transaction.value.currency.value,
            "amount": transaction.value.amount,
        },
    }
    if hasattr(transaction, "security"):
        data["isin"] = transaction.security.isin
    if hasattr(transaction, "shares"):
        data["shares"] = str(transaction.shares)
    return data


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings():
    """Reload settings from a clean state for every test."""
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


@pytest.fixture
def stub_provider() -> StubMarketDataProvider:
    """Provide a stub provider knowing only explicitly registered data."""
    provider = StubMarketDataProvider(max_lookback_days=14, use_defaults=False)
    provider.add_listing(APPLE_ISIN, Exchange.NASDAQ, APPLE_TICKER, name="Apple Inc.")
    provider.add_listing(MICROSOFT_ISIN, Exchange.NASDAQ, MICROSOFT_TICKER, name="Microsoft Corp.")
    provider.add_listing(SAP_ISIN, Exchange.XETRA, SAP_TICKER, name="SAP SE")
    return provider


@pytest.fixture
def memory_cache() -> InMemoryCache:
    """Provide an empty in-memory cache."""
    return InMemoryCache()


@pytest.fixture
def split_horizon() -> datetime:
    """Fixed upper bound for stock split queries."""
    return utc_datetime(2021, 1, 1)


@pytest.fixture
def market_data(stub_provider, memory_cache, split_horizon) -> MarketDataService:
    """Provide MarketDataService over the stub provider and in-memory cache."""
    return MarketDataService(
        provider=stub_provider,
        cache=memory_cache,
        split_horizon=split_horizon,
    )


def add_apple_close(provider: StubMarketDataProvider, day: date, amount: int) -> None:
    """Register an Apple USD close in minor units."""
    provider.add_close(Exchange.NASDAQ, APPLE_TICKER, Currency.USD, day, amount)


# =============================================================================
# PRESET LEDGER FIXTURES
# =============================================================================


@pytest.fixture
def basic_ledger(stub_provider) -> list[Transaction]:
    """
    Deposit 100.00, buy 10 Apple shares for 100.00, sell 5 for 100.00.

    Apple closes at 20.00 on 2020-01-03 and 2020-01-04.
    """
    add_apple_close(stub_provider, date(2020, 1, 3), 20_00)
    add_apple_close(stub_provider, date(2020, 1, 4), 20_00)
    return [
        cash(100_00, utc_datetime(2020, 1, 1)),
        buy(APPLE_ISIN, 10, 100_00, utc_datetime(2020, 1, 2)),
        sell(APPLE_ISIN, 5, 100_00, utc_datetime(2020, 1, 4)),
    ]


@pytest.fixture
def varied_ledger(stub_provider) -> list[Transaction]:
    """
    Deposit 100.00, buy Apple at 15.00, 25.00 and 35.00 per share (four
    shares), then sell two shares for 20.00. Apple closes at 10.00 on 2020-01-06.
    """
    add_apple_close(stub_provider, date(2020, 1, 6), 10_00)
    return [
        cash(100_00, utc_datetime(2020, 1, 1)),
        buy(APPLE_ISIN, 1, 15_00, utc_datetime(2020, 1, 2)),
        buy(APPLE_ISIN, 2, 50_00, utc_datetime(2020, 1, 3)),
        buy(APPLE_ISIN, 1, 35_00, utc_datetime(2020, 1, 4)),
        sell(APPLE_ISIN, 2, 20_00, utc_datetime(2020, 1, 6)),
    ]


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(market_data) -> TestClient:
    """Provide FastAPI test client backed by the stub market data service."""
    app.dependency_overrides[get_market_data_service] = lambda: market_data
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def usd(amount: int) -> Money:
    """Shorthand for a USD Money value."""
    return Money(currency=Currency.USD, amount=amount)


def position_for(performance_positions, isin: Optional[str]):
    """Find the PositionPerformance of isin (None selects the cash entry)."""
    for item in performance_positions:
        position = item.position
        if isin is None and is_cash_position(position):
            return item
        if isin is not None and is_security_position(position) and position.security.isin == isin:
            return item
    raise AssertionError(f"No position for {isin}")
