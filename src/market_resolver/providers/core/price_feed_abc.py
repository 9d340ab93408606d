"""Abstract base class for external price feeds."""
from abc import ABC, abstractmethod

from market_resolver.schemas import PriceQuote


class PriceFeedABC(ABC):
    """Base interface for all upstream price feeds.

    A feed adapts one loosely-typed upstream API into a PriceQuote whose
    numeric fields are either a positive float or None. Malformed or missing
    data must not leak past the adapter: feeds raise ValueError (or an
    httpx error) instead of returning partial garbage.
    """

    name: str = "feed"

    @abstractmethod
    async def get_quote(self, symbol: str) -> PriceQuote:
        """Fetch the current quote for a symbol.

        Args:
            symbol: The asset symbol as stored on the market (e.g. "AAPL", "BTCUSDT").

        Returns:
            A PriceQuote; ``price`` may be None when the upstream omits it.
        """

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "PriceFeedABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
