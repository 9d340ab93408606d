"""Main module for the market resolver service."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from market_resolver.config import ResolverSettings
from market_resolver.db.sessions import init_db
from market_resolver.routers import (markets_router, prices_router,
                                     resolver_router)
from market_resolver.services.factory import create_resolver

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for CLI and server entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create store, feeds and resolver at startup; close feeds on shutdown."""
    settings = ResolverSettings.from_env()
    components = create_resolver(settings)
    init_db(components.store.engine)

    fastapi_app.state.settings = settings
    fastapi_app.state.store = components.store
    fastapi_app.state.oracle = components.oracle
    fastapi_app.state.resolver = components.resolver

    yield

    try:
        await components.close()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error closing price feeds: %s", exc)


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI app; tests pass with_lifespan=False and fill app.state."""
    fastapi_app = FastAPI(
        title="Market Resolver",
        description="Resolution and pari-mutuel settlement of YES/NO price prediction markets",
        version="0.1.0",
        lifespan=lifespan if with_lifespan else None,
    )
    fastapi_app.include_router(resolver_router)
    fastapi_app.include_router(markets_router)
    fastapi_app.include_router(prices_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Used by the `start` script."""
    configure_logging(ResolverSettings.from_env().log_level)
    uvicorn.run("market_resolver.main:app", host="127.0.0.1", port=8001)
