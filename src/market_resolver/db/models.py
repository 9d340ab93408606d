"""Database models for the prediction market ledger.

Markets are created by the upstream standardizer with status ``pending``; the
resolver is the only writer that flips them to ``resolved``. Pools, stakes and
balances are written by the staking path and, once per market, by the resolver.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from market_resolver.utils import utcnow

MONEY_DIGITS = 20
MONEY_PLACES = 6


class AssetType(str, Enum):
    """Kind of asset a market is priced against."""

    STOCK = "stock"
    CRYPTO = "crypto"


class MarketStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class Outcome(str, Enum):
    YES = "YES"
    NO = "NO"


class Position(str, Enum):
    """Side of a stake. SKIP records a swipe without money at risk."""

    YES = "YES"
    NO = "NO"
    SKIP = "SKIP"


class TransactionType(str, Enum):
    STAKE = "stake"
    PAYOUT = "payout"


class User(SQLModel, table=True):
    """Account holding the spendable balance credited by payouts."""

    id: int | None = Field(default=None, primary_key=True)
    wallet_address: str = Field(unique=True, index=True)
    balance: Decimal = Field(
        default=Decimal("0"), max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PredictionMarket(SQLModel, table=True):
    """A single YES/NO question tied to one asset and a closing time."""

    __tablename__ = "prediction_market"

    id: int | None = Field(default=None, primary_key=True)
    question: str
    asset: str | None = None
    asset_type: str | None = None  # stock | crypto; None -> inferred from symbol
    closes_at: datetime = Field(index=True)
    status: str = Field(default=MarketStatus.PENDING.value, index=True)  # pending | resolved
    outcome: str | None = None  # YES | NO
    resolved_price: float | None = None
    resolved_at: datetime | None = None
    outcome_hash: str | None = None
    resolution_report: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON)
    )
    created_at: datetime = Field(default_factory=utcnow)


class StakePool(SQLModel, table=True):
    """Running totals staked on each side of one market."""

    __tablename__ = "stake_pool"

    id: int | None = Field(default=None, primary_key=True)
    market_id: int = Field(foreign_key="prediction_market.id", unique=True, index=True)
    total_yes: Decimal = Field(
        default=Decimal("0"), max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    total_no: Decimal = Field(
        default=Decimal("0"), max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    updated_at: datetime = Field(default_factory=utcnow)

class Stake(SQLModel, table=True):
    """One user's position on one market; at most one per (user, market)."""

    __table_args__ = (UniqueConstraint("user_id", "market_id"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    market_id: int = Field(foreign_key="prediction_market.id", index=True)
    position: str  # YES | NO | SKIP
    amount: Decimal = Field(
        default=Decimal("0"), max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    payout: Decimal | None = Field(
        default=None, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    resolved_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)


class Transaction(SQLModel, table=True):
    """Append-only ledger entry; a payout entry is evidence of a completed credit."""

    __tablename__ = "transactions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    market_id: int | None = Field(default=None, foreign_key="prediction_market.id")
    type: str  # stake | payout
    amount: Decimal = Field(max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    status: str = Field(default="confirmed")
    created_at: datetime = Field(default_factory=utcnow)
