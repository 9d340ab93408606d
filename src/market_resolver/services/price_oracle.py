"""Price oracle: one consensus price from several unreliable feeds."""
import asyncio
import logging
import statistics
from collections.abc import Sequence

from market_resolver.db import AssetType
from market_resolver.providers.core import PriceFeedABC, looks_like_crypto
from market_resolver.schemas import ConsensusPrice, PriceQuote

logger = logging.getLogger(__name__)


def classify_asset(symbol: str, asset_type: str | None = None) -> AssetType:
    """Decide whether a symbol is crypto or an equity.

    Explicit metadata wins; otherwise a crypto quote-currency suffix
    (USDT, USD, ...) marks crypto. Equity is the default.
    """
    if asset_type:
        normalized = asset_type.strip().lower()
        if normalized == AssetType.CRYPTO.value:
            return AssetType.CRYPTO
        if normalized in (AssetType.STOCK.value, "equity"):
            return AssetType.STOCK
        logger.warning("Unknown asset type %r for %s; inferring from symbol", asset_type, symbol)
    return AssetType.CRYPTO if looks_like_crypto(symbol) else AssetType.STOCK


def median_price(readings: Sequence[float]) -> float:
    """Median of readings; the mean of the two middle values for an even count."""
    if not readings:
        raise ValueError("median of no readings")
    return float(statistics.median(readings))


class PriceOracle:
    """Aggregates an equity feed and several crypto feeds into a consensus price.

    Feed failures are logged and recorded as a None reading; they never
    propagate. When no feed produced a price, get_price returns None and the
    caller should retry later.
    """

    def __init__(
        self,
        equity_feed: PriceFeedABC,
        crypto_feeds: Sequence[PriceFeedABC],
    ) -> None:
        self._equity_feed = equity_feed
        self._crypto_feeds = list(crypto_feeds)

    @property
    def feeds(self) -> list[PriceFeedABC]:
        return [self._equity_feed, *self._crypto_feeds]

    async def get_price(
        self, symbol: str, asset_type: str | None = None
    ) -> ConsensusPrice | None:
        """Consensus price for a symbol, or None when no reading was obtained."""
        kind = classify_asset(symbol, asset_type)
        if kind == AssetType.CRYPTO:
            return await self._crypto_price(symbol)
        return await self._equity_price(symbol)

    async def _equity_price(self, symbol: str) -> ConsensusPrice | None:
        quotes = await self._gather([self._equity_feed], symbol)
        quote = quotes[self._equity_feed.name]
        sources = {self._equity_feed.name: quote.price if quote else None}
        if quote is None or quote.price is None:
            logger.warning("No equity price available for %s", symbol)
            return None
        return ConsensusPrice(
            symbol=symbol,
            asset_type=AssetType.STOCK,
            price=quote.price,
            sources=sources,
            open_price=quote.open_price,
            previous_close=quote.previous_close,
        )

    async def _crypto_price(self, symbol: str) -> ConsensusPrice | None:
        quotes = await self._gather(self._crypto_feeds, symbol)
        sources = {name: q.price if q else None for name, q in quotes.items()}
        readings = [price for price in sources.values() if price is not None]
        if not readings:
            logger.warning("No crypto price available for %s from %s", symbol, list(sources))
            return None
        return ConsensusPrice(
            symbol=symbol,
            asset_type=AssetType.CRYPTO,
            price=median_price(readings),
            sources=sources,
        )

    async def _gather(
        self, feeds: Sequence[PriceFeedABC], symbol: str
    ) -> dict[str, PriceQuote | None]:
        """Query feeds concurrently; a failed feed maps to None."""
        results = await asyncio.gather(
            *[feed.get_quote(symbol) for feed in feeds],
            return_exceptions=True,
        )
        quotes: dict[str, PriceQuote | None] = {}
        for feed, result in zip(feeds, results):
            if isinstance(result, BaseException):
                logger.warning("Price feed %s failed for %s: %s", feed.name, symbol, result)
                quotes[feed.name] = None
                continue
            quotes[feed.name] = result
        return quotes

    async def close(self) -> None:
        for feed in self.feeds:
            try:
                await feed.close()
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Error closing feed %s: %s", feed.name, exc)
