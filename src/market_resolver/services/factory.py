"""Factory wiring the store, feeds, oracle and resolver from settings."""
from dataclasses import dataclass

from sqlalchemy import Engine

from market_resolver.config import ResolverSettings
from market_resolver.db import LedgerStore
from market_resolver.db.sessions import create_db_engine
from market_resolver.providers import (BinanceProvider, CoinbaseProvider,
                                       YFinanceProvider)
from market_resolver.services.price_oracle import PriceOracle
from market_resolver.services.resolver import ResolverService


@dataclass
class ResolverComponents:
    """Everything a resolution pass needs; close() releases the HTTP clients."""

    settings: ResolverSettings
    store: LedgerStore
    oracle: PriceOracle
    resolver: ResolverService

    async def close(self) -> None:
        await self.oracle.close()


def create_resolver(
    settings: ResolverSettings,
    *,
    engine: Engine | None = None,
    oracle: PriceOracle | None = None,
) -> ResolverComponents:
    """Build a ResolverService with the default feeds (Yahoo; Binance + Coinbase).

    Args:
        settings: Loaded resolver settings.
        engine: Optional engine; defaults to one built from settings.database_url.
        oracle: Optional oracle (tests pass one over fake feeds).

    Returns:
        The wired components.
    """
    store = LedgerStore(engine or create_db_engine(settings.database_url))
    if oracle is None:
        timeout = settings.http_timeout_seconds
        oracle = PriceOracle(
            equity_feed=YFinanceProvider(),
            crypto_feeds=[
                BinanceProvider(timeout=timeout),
                CoinbaseProvider(timeout=timeout),
            ],
        )
    resolver = ResolverService(store, oracle, settings)
    return ResolverComponents(settings=settings, store=store, oracle=oracle, resolver=resolver)
