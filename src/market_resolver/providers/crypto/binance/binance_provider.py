"""Binance spot price feed for crypto pairs."""
import httpx

from market_resolver.providers.core import (PriceFeedABC, binance_pair,
                                            positive_float)
from market_resolver.providers.crypto.binance.models import (
    BinanceTickerPrice, BinanceTickerPriceParams)
from market_resolver.schemas import PriceQuote


class BinanceProvider(PriceFeedABC):
    """Crypto spot price via the public Binance REST API.

    Symbols are adapted to Binance's USDT pair format ("BTC", "btc-usd" and
    "BTCUSDT" all query "BTCUSDT"). No API key required.
    """

    name = "binance"
    BASE_URL = "https://api.binance.com/api/v3"

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Binance provider.

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
        """Fetch the current spot price for a crypto pair.

        Raises:
            ValueError: When the response carries no usable price.
            httpx.HTTPError: On transport or HTTP status errors.
        """
        pair = binance_pair(symbol)
        params = BinanceTickerPriceParams(symbol=pair).model_dump()
        response = await self._client.get("/ticker/price", params=params)
        response.raise_for_status()
        ticker = BinanceTickerPrice.model_validate(response.json())

        price = positive_float(ticker.price)
        if price is None:
            raise ValueError(f"Binance returned no price for '{pair}'")
        return PriceQuote(provider=self.name, symbol=pair, price=price)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
