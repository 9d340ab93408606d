"""Core feed abstractions."""
from market_resolver.providers.core.error_mapper import ErrorMapper
from market_resolver.providers.core.exceptions import PriceUnavailableError
from market_resolver.providers.core.price_feed_abc import PriceFeedABC
from market_resolver.providers.core.utils import (binance_pair,
                                                  coinbase_pair,
                                                  looks_like_crypto,
                                                  positive_float)

__all__ = [
    "ErrorMapper",
    "PriceFeedABC",
    "PriceUnavailableError",
    "binance_pair",
    "coinbase_pair",
    "looks_like_crypto",
    "positive_float",
]
