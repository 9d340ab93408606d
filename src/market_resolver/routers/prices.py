"""Consensus price lookup (the same numbers a resolution pass would use)."""
from fastapi import APIRouter, Query

from market_resolver.deps import OracleDep
from market_resolver.providers import ErrorMapper, PriceUnavailableError
from market_resolver.schemas import ConsensusPrice

router = APIRouter(prefix="/prices", tags=["prices"])
_errors = ErrorMapper(resource_name="Price", api_name="Price oracle")


@router.get("/{symbol}", response_model=ConsensusPrice)
async def get_consensus_price(
    symbol: str,
    oracle: OracleDep,
    asset_type: str | None = Query(default=None, description="stock or crypto; inferred if omitted"),
) -> ConsensusPrice:
    """Median of the available feed readings for a symbol.

    Args:
        symbol: Stock ticker (e.g. "AAPL") or crypto pair (e.g. "BTCUSDT").
        asset_type: Optional override of the symbol-shape heuristic.
    """
    try:
        consensus = await oracle.get_price(symbol, asset_type)
        if consensus is None:
            raise PriceUnavailableError(symbol)
        return consensus
    except PriceUnavailableError as e:
        _errors.raise_http(e, identifier=symbol)
