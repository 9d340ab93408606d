"""Ledger and pool store against in-memory SQLite."""
from datetime import timedelta
from decimal import Decimal

import pytest

from market_resolver.db import (MarketNotFoundError, MarketStatus, Outcome,
                                Position, StakeRejectedError)
from tests.conftest import add_market, add_user


def test_list_due_markets_filters_and_orders(store, now, past, future):
    later = add_market(store, "Will AAPL close higher?", "AAPL", past)
    earlier = add_market(store, "Will BTC rise?", "BTCUSDT", past - timedelta(hours=2))
    add_market(store, "Will TSLA rise?", "TSLA", future)
    done = add_market(store, "Will MSFT rise?", "MSFT", past - timedelta(days=1))
    store.mark_resolved(
        done,
        outcome=Outcome.YES,
        resolved_price=1.0,
        resolved_at=now,
        outcome_hash="x",
        report={},
    )

    assert [m.id for m in store.list_due_markets(now, 10)] == [earlier, later]
    assert [m.id for m in store.list_due_markets(now, 1)] == [earlier]


def test_closes_at_equal_to_now_is_due(store, now):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", now)
    assert [m.id for m in store.list_due_markets(now, 5)] == [market_id]


def test_get_market_missing(store):
    with pytest.raises(MarketNotFoundError):
        store.get_market(404)


def test_mark_resolved_only_flips_pending_markets(store, now, past):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", past)
    fields = dict(
        outcome=Outcome.NO,
        resolved_price=149.0,
        resolved_at=now,
        outcome_hash="abc",
        report={"outcome": "NO"},
    )
    assert store.mark_resolved(market_id, **fields) is True
    assert store.mark_resolved(market_id, **dict(fields, outcome=Outcome.YES)) is False

    market = store.get_market(market_id)
    assert market.status == MarketStatus.RESOLVED.value
    assert market.outcome == "NO"
    assert market.resolved_price == 149.0
    assert market.resolved_at == now
    assert market.outcome_hash == "abc"
    assert market.resolution_report == {"outcome": "NO"}


def test_place_stake_updates_pool_balance_and_ledger(store, now, future):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", future)
    alice = add_user(store, "0xalice", 500)
    bob = add_user(store, "0xbob", 500)

    store.place_stake(alice, market_id, Position.YES, 120, now=now)
    store.place_stake(bob, market_id, Position.NO, Decimal("30.5"), now=now)

    pool = store.get_pool(market_id)
    assert (pool.total_yes, pool.total_no) == (Decimal(120), Decimal("30.5"))
    assert store.get_balance(alice) == Decimal(380)
    assert store.get_balance(bob) == Decimal("469.5")
    assert [s.position for s in store.list_stakes(market_id)] == ["YES", "NO"]
    assert [(t.type, t.amount) for t in store.list_transactions(alice)] == [("stake", Decimal(120))]


def test_skip_stake_has_no_money_effect(store, now, future):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", future)
    carol = add_user(store, "0xcarol", 50)

    stake = store.place_stake(carol, market_id, Position.SKIP, 40, now=now)

    assert stake.amount == Decimal(0)
    assert store.get_pool(market_id) is None
    assert store.get_balance(carol) == Decimal(50)
    assert store.list_transactions(carol) == []


def test_place_stake_rejections(store, now, past, future):
    open_market = add_market(store, "Will AAPL rise?", "AAPL", future)
    closed_market = add_market(store, "Will TSLA rise?", "TSLA", past)
    dave = add_user(store, "0xdave", 100)

    with pytest.raises(StakeRejectedError):
        store.place_stake(dave, open_market, Position.YES, 0, now=now)
    with pytest.raises(StakeRejectedError, match="closed"):
        store.place_stake(dave, closed_market, Position.YES, 10, now=now)
    with pytest.raises(StakeRejectedError, match="Insufficient"):
        store.place_stake(dave, open_market, Position.YES, 101, now=now)
    with pytest.raises(MarketNotFoundError):
        store.place_stake(dave, 999, Position.YES, 10, now=now)

    assert store.get_pool(open_market) is None
    assert store.list_stakes(open_market) == []
    assert store.get_balance(dave) == Decimal(100)

    store.place_stake(dave, open_market, Position.NO, 10, now=now)
    with pytest.raises(StakeRejectedError, match="already staked"):
        store.place_stake(dave, open_market, Position.YES, 10, now=now)


def test_increment_and_set_balance(store):
    erin = add_user(store, "0xerin", 10)
    store.increment_balance(erin, Decimal("2.5"))
    store.increment_balance(erin, Decimal(3))
    assert store.get_balance(erin) == Decimal("15.5")

    store.set_balance(erin, Decimal(7))
    assert store.get_balance(erin) == Decimal(7)

    with pytest.raises(MarketNotFoundError):
        store.increment_balance(999, Decimal(1))


def test_record_payout(store, now, past, future):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", future)
    frank = add_user(store, "0xfrank", 100)
    stake = store.place_stake(frank, market_id, Position.YES, 10, now=now)

    assert store.record_payout(stake.id, Decimal(12), now) is True
    saved = store.list_stakes(market_id)[0]
    assert (saved.payout, saved.resolved_at) == (Decimal(12), now)

    later = now + timedelta(minutes=5)
    assert store.record_payout(stake.id, Decimal(99), later) is False
    saved = store.list_stakes(market_id)[0]
    assert (saved.payout, saved.resolved_at) == (Decimal(12), now)

    assert store.record_payout(999, Decimal(1), now) is False


def test_append_transaction(store, past):
    market_id = add_market(store, "Will AAPL rise?", "AAPL", past)
    gina = add_user(store, "0xgina")
    store.append_transaction(gina, market_id, Decimal(42))
    [entry] = store.list_transactions(gina)
    assert (entry.type, entry.amount, entry.status, entry.market_id) == (
        "payout",
        Decimal(42),
        "confirmed",
        market_id,
    )
