"""Pari-mutuel settlement: winners split the losing pool, net of a platform fee.

All arithmetic is Decimal; the only rounding is the final floor of each
payout to a whole unit, so truncation is lost to the platform, never to a user.
"""
import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from market_resolver.db import Outcome
from market_resolver.utils import to_decimal

MIN_FEE_RATE = Decimal("0")
MAX_FEE_RATE = Decimal("0.2")


class StakeLike(Protocol):
    """What the calculator needs from a stake record."""

    id: int | None
    user_id: int
    position: str
    amount: Decimal


@dataclass(frozen=True)
class Payout:
    """All-inclusive return for one winning stake (principal plus winnings)."""

    stake_id: int
    user_id: int
    stake_amount: Decimal
    amount: Decimal


def clamp_fee_rate(fee_rate: Decimal | float | int) -> Decimal:
    """Clamp the configured fee rate into [0, 0.2]."""
    return min(max(to_decimal(fee_rate), MIN_FEE_RATE), MAX_FEE_RATE)


def compute_payouts(
    total_yes: Decimal | float | int,
    total_no: Decimal | float | int,
    stakes: Iterable[StakeLike],
    outcome: Outcome,
    fee_rate: Decimal | float | int,
) -> list[Payout]:
    """Payouts for the winning side's positive stakes.

    Losing and zero-amount stakes get no entry. Without opposing liquidity
    (or with an empty winning pool) every winner is refunded exactly their
    stake and no fee is taken.

    Args:
        total_yes: Pool total staked on YES.
        total_no: Pool total staked on NO.
        stakes: Every stake on the market, any side.
        outcome: Winning side.
        fee_rate: Fraction of the losing pool kept by the platform (clamped).
    """
    yes, no = to_decimal(total_yes), to_decimal(total_no)
    winning_pool, losing_pool = (yes, no) if outcome == Outcome.YES else (no, yes)

    winners = [
        s for s in stakes
        if s.position == outcome.value and to_decimal(s.amount) > 0
    ]
    if not winners:
        return []

    if winning_pool <= 0 or losing_pool <= 0:
        return [
            Payout(
                stake_id=s.id,
                user_id=s.user_id,
                stake_amount=to_decimal(s.amount),
                amount=to_decimal(s.amount),
            )
            for s in winners
        ]

    fee = losing_pool * clamp_fee_rate(fee_rate)
    distributable = losing_pool - fee

    payouts = []
    for s in winners:
        stake = to_decimal(s.amount)
        gain = distributable * stake / winning_pool
        payouts.append(
            Payout(
                stake_id=s.id,
                user_id=s.user_id,
                stake_amount=stake,
                # floor never takes a fractional stake below its principal
                amount=max(Decimal(math.floor(stake + gain)), stake),
            )
        )
    return payouts
