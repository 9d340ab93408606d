"""Database package: models, session management and the ledger store."""
from market_resolver.db.models import (AssetType, MarketStatus, Outcome,
                                       Position, PredictionMarket, Stake,
                                       StakePool, Transaction,
                                       TransactionType, User)
from market_resolver.db.store import (LedgerStore, MarketNotFoundError,
                                      StakeRejectedError)

__all__ = [
    "AssetType",
    "LedgerStore",
    "MarketNotFoundError",
    "MarketStatus",
    "Outcome",
    "Position",
    "PredictionMarket",
    "Stake",
    "StakePool",
    "StakeRejectedError",
    "Transaction",
    "TransactionType",
    "User",
]
