"""Protocols the resolver depends on (store and price source)."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

from market_resolver.db import Outcome, PredictionMarket, Stake, StakePool
from market_resolver.schemas import ConsensusPrice


class LedgerStoreProtocol(Protocol):
    """Read/write surface of the ledger & pool store used by a resolution pass."""

    def list_due_markets(self, now: datetime, limit: int) -> list[PredictionMarket]: ...

    def get_pool(self, market_id: int) -> StakePool | None: ...

    def list_stakes(self, market_id: int) -> list[Stake]: ...

    def record_payout(self, stake_id: int, amount: Decimal, resolved_at: datetime) -> bool: ...

    def increment_balance(self, user_id: int, amount: Decimal) -> None: ...

    def get_balance(self, user_id: int) -> Decimal: ...

    def set_balance(self, user_id: int, balance: Decimal) -> None: ...

    def append_transaction(self, user_id: int, market_id: int, amount: Decimal) -> None: ...

    def mark_resolved(
        self,
        market_id: int,
        *,
        outcome: Outcome,
        resolved_price: float,
        resolved_at: datetime,
        outcome_hash: str,
        report: dict[str, Any],
    ) -> bool: ...


class PriceSource(Protocol):
    """Anything that can produce a consensus price (e.g. PriceOracle)."""

    async def get_price(
        self, symbol: str, asset_type: str | None = None
    ) -> ConsensusPrice | None: ...
