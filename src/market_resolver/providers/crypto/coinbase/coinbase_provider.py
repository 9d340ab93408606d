"""Coinbase spot price feed for crypto pairs."""
import httpx

from market_resolver.providers.core import (PriceFeedABC, coinbase_pair,
                                            positive_float)
from market_resolver.providers.crypto.coinbase.models import CoinbaseSpotPrice
from market_resolver.schemas import PriceQuote


class CoinbaseProvider(PriceFeedABC):
    """Crypto spot price via the public Coinbase v2 API.

    Symbols are adapted to Coinbase's "BASE-USD" product format.
    """

    name = "coinbase"
    BASE_URL = "https://api.coinbase.com/v2"

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Coinbase provider.

        Args:
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def get_quote(self, symbol: str) -> PriceQuote:
        """Fetch the current spot price for a crypto pair."""
        pair = coinbase_pair(symbol)
        response = await self._client.get(f"/prices/{pair}/spot")
        response.raise_for_status()
        spot = CoinbaseSpotPrice.model_validate(response.json())

        price = positive_float(spot.data.amount)
        if price is None:
            raise ValueError(f"Coinbase returned no price for '{pair}'")
        return PriceQuote(provider=self.name, symbol=pair, price=price)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
