"""Pari-mutuel settlement calculator tests."""
from dataclasses import dataclass
from decimal import Decimal

from market_resolver.db import Outcome
from market_resolver.resolution.settlement import clamp_fee_rate, compute_payouts


@dataclass
class S:
    id: int
    user_id: int
    position: str
    amount: Decimal


def _by_stake(payouts):
    return {p.stake_id: p.amount for p in payouts}


def test_proportional_split_with_fee():
    stakes = [S(1, 10, "YES", Decimal(60)), S(2, 11, "YES", Decimal(40)), S(3, 12, "NO", Decimal(50))]
    payouts = compute_payouts(100, 50, stakes, Outcome.YES, 0.02)
    assert _by_stake(payouts) == {1: Decimal(89), 2: Decimal(59)}
    assert sum(p.amount for p in payouts) == 148
    assert sum(p.amount for p in payouts) <= 100 + 49


def test_losers_and_zero_stakes_get_no_entry():
    stakes = [
        S(1, 10, "NO", Decimal(30)),
        S(2, 11, "YES", Decimal(0)),
        S(3, 12, "SKIP", Decimal(0)),
        S(4, 13, "NO", Decimal(70)),
    ]
    payouts = compute_payouts(40, 100, stakes, Outcome.NO, 0.02)
    assert {p.stake_id for p in payouts} == {1, 4}


def test_no_liquidity_refunds_exact_stake():
    payouts = compute_payouts(100, 0, [S(1, 10, "YES", Decimal(40))], Outcome.YES, 0.02)
    assert len(payouts) == 1
    assert payouts[0].amount == Decimal(40)
    assert payouts[0].stake_amount == Decimal(40)


def test_empty_winning_pool_with_winner_records_refunds():
    payouts = compute_payouts(0, 50, [S(1, 10, "YES", Decimal(25))], Outcome.YES, 0.02)
    assert _by_stake(payouts) == {1: Decimal(25)}


def test_no_winners_returns_empty_list():
    stakes = [S(1, 10, "NO", Decimal(30))]
    assert compute_payouts(0, 30, stakes, Outcome.YES, 0.02) == []


def test_fee_rate_is_clamped():
    assert clamp_fee_rate(0.9) == Decimal("0.2")
    assert clamp_fee_rate(-0.1) == Decimal("0")
    assert clamp_fee_rate(0.05) == Decimal("0.05")

    stakes = [S(1, 10, "YES", Decimal(100)), S(2, 11, "NO", Decimal(100))]
    assert _by_stake(compute_payouts(100, 100, stakes, Outcome.YES, 0.9)) == {1: Decimal(180)}
    assert _by_stake(compute_payouts(100, 100, stakes, Outcome.YES, -0.1)) == {1: Decimal(200)}


def test_single_winner_takes_distributable():
    stakes = [S(1, 1, "YES", Decimal(300)), S(2, 2, "NO", Decimal(100))]
    assert _by_stake(compute_payouts(300, 100, stakes, Outcome.YES, 0.02)) == {1: Decimal(398)}


def test_payouts_never_below_stake_and_bounded_by_pool():
    stakes = [S(i, i, "YES", Decimal(7)) for i in range(1, 4)] + [S(9, 9, "NO", Decimal(10))]
    payouts = compute_payouts(21, 10, stakes, Outcome.YES, 0.02)
    distributable = Decimal(10) - Decimal(10) * Decimal("0.02")
    assert all(p.amount >= p.stake_amount for p in payouts)
    assert all(p.amount == p.amount.to_integral_value() for p in payouts)
    assert sum(p.amount for p in payouts) <= 21 + distributable
