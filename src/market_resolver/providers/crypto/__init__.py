"""Cryptocurrency spot price feeds."""
from market_resolver.providers.crypto.binance import BinanceProvider
from market_resolver.providers.crypto.coinbase import CoinbaseProvider

__all__ = ["BinanceProvider", "CoinbaseProvider"]
