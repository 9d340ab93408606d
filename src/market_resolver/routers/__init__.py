"""API routers.

Includes routes for:
- /resolver/run - trigger one resolution pass
- /markets - due markets, market read-back and outcome-hash verification
- /prices - consensus price lookup
"""
from market_resolver.routers.markets import router as markets_router
from market_resolver.routers.prices import router as prices_router
from market_resolver.routers.resolver import router as resolver_router

__all__ = [
    "markets_router",
    "prices_router",
    "resolver_router",
]
