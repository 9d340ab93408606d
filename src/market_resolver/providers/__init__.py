"""External price feeds for equities and crypto.

All feeds implement PriceFeedABC and return PriceQuote objects:

- YFinanceProvider: equity last price, session open and previous close
- BinanceProvider: crypto spot price (USDT pairs)
- CoinbaseProvider: crypto spot price (USD products)

Example:
    async with BinanceProvider() as feed:
        quote = await feed.get_quote("BTC")
        print(f"{quote.symbol}: ${quote.price}")
"""
from market_resolver.providers.core import (ErrorMapper, PriceFeedABC,
                                            PriceUnavailableError)
from market_resolver.providers.crypto import BinanceProvider, CoinbaseProvider
from market_resolver.providers.stocks import YFinanceProvider

__all__ = [
    "BinanceProvider",
    "CoinbaseProvider",
    "ErrorMapper",
    "PriceFeedABC",
    "PriceUnavailableError",
    "YFinanceProvider",
]
