"""Read-back routes for markets and their resolution reports."""
from fastapi import APIRouter, Query

from market_resolver.db import MarketNotFoundError, PredictionMarket
from market_resolver.deps import SettingsDep, StoreDep
from market_resolver.providers import ErrorMapper
from market_resolver.resolution import verify_outcome_hash
from market_resolver.schemas import HashVerification, MarketView
from market_resolver.utils import utcnow

router = APIRouter(prefix="/markets", tags=["markets"])
_errors = ErrorMapper(resource_name="Market", api_name="Ledger")


def _view(market: PredictionMarket) -> MarketView:
    return MarketView.model_validate(market, from_attributes=True)


@router.get("/due", response_model=list[MarketView])
def list_due_markets(
    store: StoreDep,
    settings: SettingsDep,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> list[MarketView]:
    """Pending markets whose closing time has passed (the next pass's batch)."""
    markets = store.list_due_markets(utcnow(), limit or settings.batch_size)
    return [_view(m) for m in markets]


@router.get("/{market_id}", response_model=MarketView)
def get_market(market_id: int, store: StoreDep) -> MarketView:
    """Get a market, including its outcome, hash and report once resolved."""
    try:
        return _view(store.get_market(market_id))
    except MarketNotFoundError as e:
        _errors.raise_http(e, identifier=market_id)


@router.get("/{market_id}/verify", response_model=HashVerification)
def verify_market(market_id: int, store: StoreDep) -> HashVerification:
    """Recompute the outcome hash from the stored report and compare."""
    try:
        market = store.get_market(market_id)
    except MarketNotFoundError as e:
        _errors.raise_http(e, identifier=market_id)
    return HashVerification(
        market_id=market_id,
        outcome_hash=market.outcome_hash,
        valid=verify_outcome_hash(market),
    )
