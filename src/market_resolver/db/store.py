"""Ledger & pool store: the durable record the resolver reads and mutates.

Every method opens its own short session, so one failed write never leaves
another caller's work half-committed.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Engine, update
from sqlmodel import col, select

from market_resolver.db.models import (MarketStatus, Outcome, Position,
                                       PredictionMarket, Stake, StakePool,
                                       Transaction, TransactionType, User)
from market_resolver.db.sessions import session_scope
from market_resolver.utils import to_decimal, utcnow

logger = logging.getLogger(__name__)


class MarketNotFoundError(LookupError):
    """Raised when a market (or a user it references) does not exist."""


class StakeRejectedError(ValueError):
    """Raised when a stake cannot be placed on a market."""


class LedgerStore:
    """SQLModel-backed store for markets, pools, stakes, balances and transactions."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # Markets

    def list_due_markets(self, now: datetime, limit: int) -> list[PredictionMarket]:
        """Pending markets whose closing time has passed, oldest first."""
        statement = (
            select(PredictionMarket)
            .where(col(PredictionMarket.status) == MarketStatus.PENDING.value)
            .where(col(PredictionMarket.closes_at) <= now)
            .order_by(col(PredictionMarket.closes_at), col(PredictionMarket.id))
            .limit(limit)
        )
        with session_scope(self._engine) as session:
            return list(session.exec(statement).all())

    def get_market(self, market_id: int) -> PredictionMarket:
        with session_scope(self._engine) as session:
            market = session.get(PredictionMarket, market_id)
            if market is None:
                raise MarketNotFoundError(f"Market {market_id} not found")
            return market

    def mark_resolved(
        self,
        market_id: int,
        *,
        outcome: Outcome,
        resolved_price: float,
        resolved_at: datetime,
        outcome_hash: str,
        report: dict[str, Any],
    ) -> bool:
        """Flip a pending market to resolved with all outcome fields at once.

        Returns False when the market was no longer pending (no row changed).
        """
        statement = (
            update(PredictionMarket)
            .where(col(PredictionMarket.id) == market_id)
            .where(col(PredictionMarket.status) == MarketStatus.PENDING.value)
            .values(
                status=MarketStatus.RESOLVED.value,
                outcome=outcome.value,
                resolved_price=resolved_price,
                resolved_at=resolved_at,
                outcome_hash=outcome_hash,
                resolution_report=report,
            )
        )
        with session_scope(self._engine) as session:
            result = session.execute(statement)
            return result.rowcount == 1

    # Pools and stakes

    def get_pool(self, market_id: int) -> StakePool | None:
        statement = select(StakePool).where(col(StakePool.market_id) == market_id)
        with session_scope(self._engine) as session:
            return session.exec(statement).first()

    def list_stakes(self, market_id: int) -> list[Stake]:
        statement = (
            select(Stake)
            .where(col(Stake.market_id) == market_id)
            .order_by(col(Stake.id))
        )
        with session_scope(self._engine) as session:
            return list(session.exec(statement).all())

    def record_payout(self, stake_id: int, amount: Decimal, resolved_at: datetime) -> bool:
        """Settle a stake once: write payout and resolved timestamp if still unsettled.

        Returns False when the stake is missing or was already settled by
        another pass, so the caller must not credit it again.
        """
        statement = (
            update(Stake)
            .where(col(Stake.id) == stake_id)
            .where(col(Stake.resolved_at).is_(None))
            .values(payout=amount, resolved_at=resolved_at)
        )
        with session_scope(self._engine) as session:
            return session.execute(statement).rowcount == 1

    def place_stake(
        self,
        user_id: int,
        market_id: int,
        position: Position,
        amount: Decimal | int | float,
        now: datetime | None = None,
    ) -> Stake:
        """Record a user's stake, grow the market pool and debit the balance.

        SKIP positions are recorded with zero amount and leave pool and
        balance untouched. A user may hold only one stake per market.
        """
        now = now or utcnow()
        amount = to_decimal(amount) if position != Position.SKIP else Decimal("0")
        if position != Position.SKIP and amount <= 0:
            raise StakeRejectedError("Stake amount must be positive")

        with session_scope(self._engine) as session:
            market = session.get(PredictionMarket, market_id)
            if market is None:
                raise MarketNotFoundError(f"Market {market_id} not found")
            if market.status != MarketStatus.PENDING.value:
                raise StakeRejectedError(f"Market {market_id} is not pending")
            if market.closes_at <= now:
                raise StakeRejectedError(f"Market {market_id} is closed")

            user = session.get(User, user_id)
            if user is None:
                raise MarketNotFoundError(f"User {user_id} not found")

            existing = session.exec(
                select(Stake)
                .where(col(Stake.user_id) == user_id)
                .where(col(Stake.market_id) == market_id)
            ).first()
            if existing is not None:
                raise StakeRejectedError(
                    f"User {user_id} already staked on market {market_id}"
                )

            stake = Stake(
                user_id=user_id, market_id=market_id, position=position.value, amount=amount
            )
            session.add(stake)
            if position == Position.SKIP:
                session.flush()
                return stake

            if user.balance < amount:
                raise StakeRejectedError("Insufficient balance")
            user.balance = user.balance - amount
            user.updated_at = now
            session.add(user)

            pool = session.exec(
                select(StakePool).where(col(StakePool.market_id) == market_id)
            ).first()
            if pool is None:
                pool = StakePool(market_id=market_id)
            if position == Position.YES:
                pool.total_yes = pool.total_yes + amount
            else:
                pool.total_no = pool.total_no + amount
            pool.updated_at = now
            session.add(pool)

            session.add(
                Transaction(
                    user_id=user_id,
                    market_id=market_id,
                    type=TransactionType.STAKE.value,
                    amount=amount,
                )
            )
            session.flush()
            return stake

    # Balances and transactions

    def increment_balance(self, user_id: int, amount: Decimal) -> None:
        """Atomically add amount to a user's balance in a single UPDATE."""
        statement = (
            update(User)
            .where(col(User.id) == user_id)
            .values(balance=col(User.balance) + amount, updated_at=utcnow())
        )
        with session_scope(self._engine) as session:
            if session.execute(statement).rowcount != 1:
                raise MarketNotFoundError(f"User {user_id} not found")

    def get_balance(self, user_id: int) -> Decimal:
        with session_scope(self._engine) as session:
            user = session.get(User, user_id)
            if user is None:
                raise MarketNotFoundError(f"User {user_id} not found")
            return to_decimal(user.balance)

    def set_balance(self, user_id: int, balance: Decimal) -> None:
        statement = (
            update(User)
            .where(col(User.id) == user_id)
            .values(balance=balance, updated_at=utcnow())
        )
        with session_scope(self._engine) as session:
            if session.execute(statement).rowcount != 1:
                raise MarketNotFoundError(f"User {user_id} not found")

    def append_transaction(self, user_id: int, market_id: int, amount: Decimal) -> None:
        with session_scope(self._engine) as session:
            session.add(
                Transaction(
                    user_id=user_id,
                    market_id=market_id,
                    type=TransactionType.PAYOUT.value,
                    amount=amount,
                    status="confirmed",
                )
            )

    def list_transactions(self, user_id: int) -> list[Transaction]:
        statement = (
            select(Transaction)
            .where(col(Transaction.user_id) == user_id)
            .order_by(col(Transaction.id))
        )
        with session_scope(self._engine) as session:
            return list(session.exec(statement).all())
