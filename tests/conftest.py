"""Shared fixtures: in-memory ledger, seed helpers and fake price feeds."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from market_resolver.db import AssetType, LedgerStore, PredictionMarket, User
from market_resolver.db.sessions import create_db_engine, init_db, session_scope
from market_resolver.providers import PriceFeedABC
from market_resolver.schemas import ConsensusPrice, PriceQuote

NOW = datetime(2026, 3, 2, 21, 5, 0)

AAPL = ConsensusPrice(
    symbol="AAPL",
    asset_type=AssetType.STOCK,
    price=151.20,
    sources={"yahoo": 151.20},
    open_price=150.0,
    previous_close=149.0,
)
BTC = ConsensusPrice(
    symbol="BTCUSDT",
    asset_type=AssetType.CRYPTO,
    price=97050.0,
    sources={"binance": 97000.0, "coinbase": 97100.0},
)


@pytest.fixture
def engine():
    eng = create_db_engine("sqlite://", echo=False)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return LedgerStore(engine)


def add_user(store: LedgerStore, wallet: str, balance: int | Decimal = 0) -> int:
    with session_scope(store.engine) as session:
        user = User(wallet_address=wallet, balance=Decimal(balance))
        session.add(user)
        session.flush()
        return user.id


def add_market(
    store: LedgerStore,
    question: str,
    asset: str | None,
    closes_at: datetime,
    asset_type: str | None = None,
) -> int:
    with session_scope(store.engine) as session:
        market = PredictionMarket(
            question=question, asset=asset, asset_type=asset_type, closes_at=closes_at
        )
        session.add(market)
        session.flush()
        return market.id


class FakeFeed(PriceFeedABC):
    """Feed returning canned quotes or raising a canned error."""

    def __init__(self, name: str, quote: PriceQuote | None = None, error: Exception | None = None):
        self.name = name
        self._quote = quote
        self._error = error
        self.calls: list[str] = []
        self.closed = False

    async def get_quote(self, symbol: str) -> PriceQuote:
        self.calls.append(symbol)
        if self._error is not None:
            raise self._error
        return self._quote

    async def close(self) -> None:
        self.closed = True


class FakeOracle:
    """Oracle returning fixed consensus prices per symbol (None = unavailable)."""

    def __init__(self, prices: dict[str, ConsensusPrice | None]):
        self._prices = prices
        self.calls: list[tuple[str, str | None]] = []

    async def get_price(self, symbol: str, asset_type: str | None = None):
        self.calls.append((symbol, asset_type))
        return self._prices.get(symbol)

    async def close(self) -> None:
        pass


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def past(now):
    return now - timedelta(minutes=5)


@pytest.fixture
def future(now):
    return now + timedelta(hours=1)
