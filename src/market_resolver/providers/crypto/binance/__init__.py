from market_resolver.providers.crypto.binance.binance_provider import \
    BinanceProvider

__all__ = ["BinanceProvider"]
