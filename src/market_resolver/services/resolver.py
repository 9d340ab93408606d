"""Resolution orchestrator: drives one pass over markets whose closing time has passed.

Per market: price -> classify -> report + hash -> settle -> pay -> flip to
resolved. Any failure before the final flip leaves the market pending for the
next pass. Winning stakes that already carry a resolved timestamp were paid
by an earlier, interrupted pass and are not paid again. The stake write is
conditional on the stake being unsettled, so two processes racing over the
same market credit each stake once.

Store calls are blocking and run in worker threads.
"""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from market_resolver.config import ResolverSettings
from market_resolver.db import PredictionMarket
from market_resolver.resolution import (Confidence, Payout, ResolutionReport,
                                        classify, compute_outcome_hash,
                                        compute_payouts)
from market_resolver.schemas import ConsensusPrice
from market_resolver.services.protocols import (LedgerStoreProtocol,
                                                PriceSource)
from market_resolver.utils import utcnow

logger = logging.getLogger(__name__)


class MarketResult(str, Enum):
    """What a pass did with one market."""

    RESOLVED = "resolved"
    RESOLVED_NO_STAKES = "resolved_no_stakes"
    ALREADY_RESOLVED = "already_resolved"
    SKIPPED_NO_ASSET = "skipped_no_asset"
    SKIPPED_NO_PRICE = "skipped_no_price"
    SKIPPED_STAKES_UNAVAILABLE = "skipped_stakes_unavailable"
    FAILED = "failed"


class CreditResult(str, Enum):
    """Which path credited a balance."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
    FAILED = "failed"


class PayoutResult(str, Enum):
    """What happened to one computed payout."""

    APPLIED = "applied"
    ALREADY_SETTLED = "already_settled"
    FAILED = "failed"


class PassSummary(BaseModel):
    started_at: datetime
    finished_at: datetime | None = None
    skipped_overlap: bool = False
    markets: dict[int, MarketResult] = Field(default_factory=dict)
    payouts_applied: int = 0
    payouts_failed: int = 0

    def count(self, result: MarketResult) -> int:
        return sum(1 for r in self.markets.values() if r == result)


class ResolverService:
    """Runs resolution passes; at most one pass is active at a time."""

    def __init__(
        self,
        store: LedgerStoreProtocol,
        oracle: PriceSource,
        settings: ResolverSettings | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._settings = settings or ResolverSettings()
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run_pass(self) -> PassSummary:
        """Resolve up to batch_size due markets, one after another.

        Returns immediately (skipped_overlap=True) if a pass is already running.
        """
        summary = PassSummary(started_at=self._clock())
        if self._lock.locked():
            logger.info("Resolution pass already running; skipping this trigger")
            summary.skipped_overlap = True
            return summary

        async with self._lock:
            try:
                markets = await asyncio.to_thread(
                    self._store.list_due_markets, summary.started_at, self._settings.batch_size
                )
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to fetch due markets")
                summary.finished_at = self._clock()
                return summary

            logger.info("Found %d due markets to resolve", len(markets))
            for market in markets:
                try:
                    result = await self.resolve_market(market, summary)
                except Exception:  # pylint: disable=broad-except
                    logger.exception("Unexpected error resolving market %s", market.id)
                    result = MarketResult.FAILED
                summary.markets[market.id] = result
                logger.info("Market %s: %s", market.id, result.value)

            summary.finished_at = self._clock()
            logger.info(
                "Resolution pass done: %d resolved, %d payouts applied, %d payouts failed",
                summary.count(MarketResult.RESOLVED)
                + summary.count(MarketResult.RESOLVED_NO_STAKES),
                summary.payouts_applied,
                summary.payouts_failed,
            )
            return summary

    async def resolve_market(
        self, market: PredictionMarket, summary: PassSummary | None = None
    ) -> MarketResult:
        """Resolve one due market. Leaves it pending on any skip."""
        asset = (market.asset or "").strip()
        if not asset:
            logger.warning("Market %s has no asset symbol; leaving pending", market.id)
            return MarketResult.SKIPPED_NO_ASSET

        consensus = await self._oracle.get_price(asset, market.asset_type)
        if consensus is None:
            logger.warning("No price for %s (market %s); retrying next pass", asset, market.id)
            return MarketResult.SKIPPED_NO_PRICE

        resolved_at = self._clock()
        report = self._build_report(market, asset, consensus, resolved_at)
        outcome_hash = compute_outcome_hash(report)
        logger.info(
            "Market %s classified %s by %s (price=%s, hash=%s...)",
            market.id,
            report.outcome.value,
            report.resolution_rule,
            consensus.price,
            outcome_hash[:10],
        )

        pool = await asyncio.to_thread(self._store.get_pool, market.id)
        if pool is None:
            logger.info("Market %s had no stakes; resolving without payouts", market.id)
            return await self._finalize(
                market, report, outcome_hash, MarketResult.RESOLVED_NO_STAKES
            )

        try:
            stakes = await asyncio.to_thread(self._store.list_stakes, market.id)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Failed to load stakes for market %s; leaving pending", market.id
            )
            return MarketResult.SKIPPED_STAKES_UNAVAILABLE

        payouts = compute_payouts(
            pool.total_yes,
            pool.total_no,
            stakes,
            report.outcome,
            self._settings.platform_fee_rate,
        )
        already_paid = {s.id for s in stakes if s.resolved_at is not None}
        logger.info(
            "Market %s pools YES=%s NO=%s: %d payouts",
            market.id,
            pool.total_yes,
            pool.total_no,
            len(payouts),
        )

        for payout in payouts:
            if payout.stake_id in already_paid:
                logger.info("Stake %s already settled; not paying again", payout.stake_id)
                continue
            result = await self.apply_payout(market.id, payout, resolved_at)
            if summary is not None:
                if result == PayoutResult.APPLIED:
                    summary.payouts_applied += 1
                elif result == PayoutResult.FAILED:
                    summary.payouts_failed += 1

        return await self._finalize(market, report, outcome_hash, MarketResult.RESOLVED)

    async def apply_payout(
        self, market_id: int, payout: Payout, resolved_at: datetime
    ) -> PayoutResult:
        """Settle a payout on its stake, credit the user, then log the transaction.

        The stake write only succeeds for a stake nobody settled yet; when
        another pass got there first, nothing is credited. The caller moves
        on to the next payout whatever the result.
        """
        try:
            settled = await asyncio.to_thread(
                self._store.record_payout, payout.stake_id, payout.amount, resolved_at
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to record payout on stake %s", payout.stake_id)
            return PayoutResult.FAILED
        if not settled:
            logger.info(
                "Stake %s already settled by another pass; not crediting again",
                payout.stake_id,
            )
            return PayoutResult.ALREADY_SETTLED

        credit = await self.credit_balance(payout.user_id, payout.amount)
        if credit == CreditResult.FAILED:
            logger.error(
                "Payout of %s to user %s (stake %s) recorded but not credited; reconcile manually",
                payout.amount,
                payout.user_id,
                payout.stake_id,
            )
            return PayoutResult.FAILED

        try:
            await asyncio.to_thread(
                self._store.append_transaction, payout.user_id, market_id, payout.amount
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Credited user %s with %s but failed to log the transaction",
                payout.user_id,
                payout.amount,
            )
        logger.info(
            "User %s: stake=%s payout=%s via %s",
            payout.user_id,
            payout.stake_amount,
            payout.amount,
            credit.value,
        )
        return PayoutResult.APPLIED

    async def credit_balance(self, user_id: int, amount: Decimal) -> CreditResult:
        """Atomic increment first; read-then-write as the compensating fallback."""
        try:
            await asyncio.to_thread(self._store.increment_balance, user_id, amount)
            return CreditResult.PRIMARY
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "Atomic balance increment failed for user %s: %s; falling back", user_id, exc
            )

        try:
            current = await asyncio.to_thread(self._store.get_balance, user_id)
            await asyncio.to_thread(self._store.set_balance, user_id, current + amount)
            return CreditResult.FALLBACK
        except Exception:  # pylint: disable=broad-except
            logger.exception("Fallback balance update failed for user %s", user_id)
            return CreditResult.FAILED

    def _build_report(
        self,
        market: PredictionMarket,
        asset: str,
        consensus: ConsensusPrice,
        resolved_at: datetime,
    ) -> ResolutionReport:
        classification = classify(
            market.question,
            consensus.price,
            consensus.open_price,
            consensus.previous_close,
        )
        notes = list(classification.notes)
        if classification.confidence == Confidence.LOW:
            notes.append("Lowest-confidence fallback: no price target or reference price")
            logger.warning(
                "Market %s resolved by cue-word fallback (low confidence)", market.id
            )
        return ResolutionReport(
            market_id=market.id,
            asset=asset,
            asset_type=consensus.asset_type.value,
            question=market.question,
            final_price=consensus.price,
            price_sources=consensus.sources,
            open_price=consensus.open_price,
            previous_close=consensus.previous_close,
            outcome=classification.outcome,
            resolution_rule=classification.rule,
            confidence=classification.confidence.value,
            resolved_at=resolved_at,
            notes=notes,
        )

    async def _finalize(
        self,
        market: PredictionMarket,
        report: ResolutionReport,
        outcome_hash: str,
        result: MarketResult,
    ) -> MarketResult:
        flipped = await asyncio.to_thread(
            self._store.mark_resolved,
            market.id,
            outcome=report.outcome,
            resolved_price=report.final_price,
            resolved_at=report.resolved_at,
            outcome_hash=outcome_hash,
            report=report.to_payload(),
        )
        if not flipped:
            logger.warning("Market %s was no longer pending; left unchanged", market.id)
            return MarketResult.ALREADY_RESOLVED
        return result
