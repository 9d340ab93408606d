from market_resolver.providers.crypto.coinbase.coinbase_provider import \
    CoinbaseProvider

__all__ = ["CoinbaseProvider"]
