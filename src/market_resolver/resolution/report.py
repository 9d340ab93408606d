"""Resolution report and its content hash.

The hash is SHA-256 over the canonical JSON of the report (sorted keys,
compact separators), so it can be reproduced from the stored report alone.
"""
import hashlib
import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from market_resolver.db import Outcome, PredictionMarket


class ResolutionReport(BaseModel):
    """Auditable record of how a market was resolved."""

    market_id: int
    asset: str
    asset_type: str
    question: str
    final_price: float
    price_sources: dict[str, float | None]
    open_price: float | None = None
    previous_close: float | None = None
    outcome: Outcome
    resolution_rule: str
    confidence: str
    resolved_at: datetime
    notes: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict; this is what gets stored and hashed."""
        return self.model_dump(mode="json")


def canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_payload(payload: dict[str, Any]) -> str:
    """SHA-256 hex digest of a report payload."""
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()


def compute_outcome_hash(report: ResolutionReport) -> str:
    return hash_payload(report.to_payload())


def verify_outcome_hash(market: PredictionMarket) -> bool:
    """True when the stored hash matches the stored report of a resolved market."""
    if not market.resolution_report or not market.outcome_hash:
        return False
    return hash_payload(market.resolution_report) == market.outcome_hash
