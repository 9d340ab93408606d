"""Service layer: price oracle, resolution orchestrator and scheduler."""
from market_resolver.services.price_oracle import (PriceOracle,
                                                   classify_asset,
                                                   median_price)
from market_resolver.services.resolver import (CreditResult, MarketResult,
                                               PassSummary, PayoutResult,
                                               ResolverService)
from market_resolver.services.scheduler import run_periodically

__all__ = [
    "CreditResult",
    "MarketResult",
    "PassSummary",
    "PayoutResult",
    "PriceOracle",
    "ResolverService",
    "classify_asset",
    "median_price",
    "run_periodically",
]
