"""
Pytest configuration and fixtures for the pricing and valuation engine tests.

This module provides:
- A controllable clock for TTL and holding-period tests
- Deterministic, slow and failing price fetchers
- An in-memory holdings repository
- In-memory SQLite database fixtures
- Factory helpers for holding snapshots
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from stocktracker.config.settings import Settings, reset_settings, set_settings
from stocktracker.core.timezone import UTC
from stocktracker.domain.models import HoldingSnapshot
from stocktracker.repositories.sqlalchemy.database import Base, reset_database
# Import ORM models to register them with Base before creating tables
from stocktracker.repositories.sqlalchemy import orm_models  # noqa: F401
from stocktracker.repositories.sqlalchemy import SqlAlchemyHoldingsRepository
from stocktracker.services import (
    CgtEngine,
    PortfolioService,
    PriceCache,
    ValuationEngine,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create an aware UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


FIXED_NOW = utc_datetime(2024, 6, 15, 14, 30, 0)


class FakeClock:
    """Manually advanced clock, callable like now_utc()."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return FIXED_NOW


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock starting at FIXED_NOW."""
    return FakeClock()


# =============================================================================
# PRICE FETCHER FIXTURES
# =============================================================================


class DeterministicPriceFetcher:
    """
    Deterministic price fetcher for testing.

    Returns fixed prices, records every call, and can be slowed down so that
    concurrent callers overlap.
    """

    FIXED_PRICES = {
        "BHP": Decimal("45.20"),
        "CBA": Decimal("128.75"),
        "CSL": Decimal("290.10"),
        "NAB": Decimal("34.15"),
        "WES": Decimal("68.90"),
    }

    def __init__(
        self,
        prices: Optional[dict[str, Decimal]] = None,
        delay_seconds: float = 0.0,
    ):
        self.prices = dict(self.FIXED_PRICES if prices is None else prices)
        self.delay_seconds = delay_seconds
        self.calls: list[str] = []

    async def fetch_latest(self, ticker: str) -> Optional[Decimal]:
        self.calls.append(ticker)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return self.prices.get(ticker)


class FailingPriceFetcher:
    """Price fetcher that always raises, ignoring its own contract."""

    def __init__(self):
        self.calls: list[str] = []

    async def fetch_latest(self, ticker: str) -> Optional[Decimal]:
        self.calls.append(ticker)
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_fetcher() -> DeterministicPriceFetcher:
    """Provide deterministic price fetcher."""
    return DeterministicPriceFetcher()


@pytest.fixture
def failing_fetcher() -> FailingPriceFetcher:
    """Provide a price fetcher that always fails."""
    return FailingPriceFetcher()


# =============================================================================
# HOLDINGS FIXTURES
# =============================================================================


class InMemoryHoldingsRepository:
    """Holdings store backed by a dict of owner -> holdings."""

    def __init__(self, holdings: Optional[dict[str, list[HoldingSnapshot]]] = None):
        self.holdings = holdings or {}
        self.ticker_queries = 0

    def list_by_owner(self, owner_id: str) -> list[HoldingSnapshot]:
        return list(self.holdings.get(owner_id, []))

    def list_all_tickers(self) -> list[str]:
        self.ticker_queries += 1
        return sorted({h.ticker for rows in self.holdings.values() for h in rows})


def make_holding(
    ticker: str = "BHP",
    quantity: str = "10",
    buy_price: str = "40",
    brokerage: str = "0",
    days_ago: int = 100,
    holding_id: int = 1,
    now: datetime = FIXED_NOW,
) -> HoldingSnapshot:
    """Build a HoldingSnapshot bought days_ago before now."""
    return HoldingSnapshot(
        id=holding_id,
        ticker=ticker,
        buy_date=now - timedelta(days=days_ago),
        quantity=Decimal(quantity),
        buy_price=Decimal(buy_price),
        brokerage=Decimal(brokerage),
    )


@pytest.fixture
def holding_factory() -> Callable[..., HoldingSnapshot]:
    """Factory for holding snapshots with auto-incrementing ids."""
    counter = {"next": 1}

    def _create(**kwargs) -> HoldingSnapshot:
        kwargs.setdefault("holding_id", counter["next"])
        counter["next"] += 1
        return make_holding(**kwargs)

    return _create


@pytest.fixture
def holdings_repo() -> InMemoryHoldingsRepository:
    """Provide an empty in-memory holdings repository."""
    return InMemoryHoldingsRepository()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def price_cache(deterministic_fetcher, clock) -> PriceCache:
    """Provide a PriceCache over the deterministic fetcher and fake clock."""
    return PriceCache(fetcher=deterministic_fetcher, ttl_seconds=900, clock=clock)


@pytest.fixture
def valuation_engine() -> ValuationEngine:
    return ValuationEngine()


@pytest.fixture
def cgt_engine(clock) -> CgtEngine:
    return CgtEngine(clock=clock)


@pytest.fixture
def portfolio_service(holdings_repo, price_cache, valuation_engine, cgt_engine) -> PortfolioService:
    """Provide PortfolioService wired to in-memory collaborators."""
    return PortfolioService(
        holdings_repo=holdings_repo,
        price_cache=price_cache,
        valuation_engine=valuation_engine,
        cgt_engine=cgt_engine,
    )


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
    engine.dispose()


@pytest.fixture
def test_session_factory(test_engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def sql_holdings_repo(test_session_factory) -> SqlAlchemyHoldingsRepository:
    """Provide SQLAlchemy holdings repository over the test database."""
    return SqlAlchemyHoldingsRepository(test_session_factory)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Offline settings: stub prices, in-memory database, no refresh loop."""
    return Settings(
        database_url="sqlite://",
        price_provider="stub",
        price_refresh_enabled=False,
        log_level="WARNING",
    )


@pytest.fixture
def client(test_settings) -> TestClient:
    """Provide FastAPI test client running the full lifespan."""
    from stocktracker.main import app

    reset_database()
    set_settings(test_settings)
    with TestClient(app) as c:
        yield c
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0000001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
