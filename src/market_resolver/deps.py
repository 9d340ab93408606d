"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

No external DI container. Lifespan (main.py) creates the store, feeds, oracle
and resolver once and attaches them to app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from market_resolver.config import ResolverSettings
from market_resolver.db import LedgerStore
from market_resolver.services import PriceOracle, ResolverService


def get_settings(request: Request) -> ResolverSettings:
    """Resolve settings from app.state (loaded at startup)."""
    return request.app.state.settings


def get_store(request: Request) -> LedgerStore:
    """Resolve the ledger store from app.state."""
    return request.app.state.store


def get_oracle(request: Request) -> PriceOracle:
    """Resolve the price oracle from app.state."""
    return request.app.state.oracle


def get_resolver(request: Request) -> ResolverService:
    """Resolve the resolution orchestrator from app.state."""
    return request.app.state.resolver


def require_cron_secret(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject trigger calls without ``Bearer <CRON_SECRET>`` when a secret is set."""
    secret = request.app.state.settings.cron_secret
    if secret and authorization != f"Bearer {secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")


# Type aliases for route injection
SettingsDep = Annotated[ResolverSettings, Depends(get_settings)]
StoreDep = Annotated[LedgerStore, Depends(get_store)]
OracleDep = Annotated[PriceOracle, Depends(get_oracle)]
ResolverDep = Annotated[ResolverService, Depends(get_resolver)]
