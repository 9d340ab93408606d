"""Pydantic schemas for feed results and API responses. Not persisted to DB."""
from datetime import datetime

from pydantic import BaseModel, Field

from market_resolver.db import AssetType
from market_resolver.utils import utcnow


class PriceQuote(BaseModel):
    """One feed's reading for one symbol. Every numeric field is optional."""

    provider: str
    symbol: str
    price: float | None = None
    open_price: float | None = None
    previous_close: float | None = None
    timestamp: datetime = Field(default_factory=utcnow)


class ConsensusPrice(BaseModel):
    """Median of the readings that succeeded, plus equity reference prices."""

    symbol: str
    asset_type: AssetType
    price: float
    sources: dict[str, float | None]
    open_price: float | None = None
    previous_close: float | None = None


class MarketView(BaseModel):
    """Read model of a prediction market."""

    id: int
    question: str
    asset: str | None
    asset_type: str | None
    closes_at: datetime
    status: str
    outcome: str | None = None
    resolved_price: float | None = None
    resolved_at: datetime | None = None
    outcome_hash: str | None = None
    resolution_report: dict | None = None


class HashVerification(BaseModel):
    market_id: int
    outcome_hash: str | None
    valid: bool


__all__ = [
    "ConsensusPrice",
    "HashVerification",
    "MarketView",
    "PriceQuote",
]
