"""Outcome classifier rule tests."""
from decimal import Decimal

import pytest

from market_resolver.db import Outcome
from market_resolver.resolution.classifier import (Confidence, classify,
                                                   parse_percent,
                                                   parse_price_target)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("BTC above $97,000 by Friday?", Decimal("97000")),
        ("Will ETH trade over 3500.25?", Decimal("3500.25")),
        ("Will BTC reach $100000?", Decimal("100000")),
        ("Will it rise by 2% today?", None),
        ("Will NVDA drop -3.5% this week?", None),
        ("Will S&P500 close higher?", None),
        ("Will AAPL close higher today?", None),
    ],
)
def test_parse_price_target(text, expected):
    assert parse_price_target(text) == expected


def test_parse_percent_is_signed():
    assert parse_percent("up +2% today") == Decimal("0.02")
    assert parse_percent("down -3.5% this week") == Decimal("-0.035")
    assert parse_percent("no numbers here") is None


def test_price_target_wins_over_sentiment_words():
    result = classify("BTC will reach $100000 even though it looks weak", 100500)
    assert result.outcome == Outcome.YES
    assert result.rule == "price_target"
    assert result.confidence == Confidence.HIGH


def test_price_target_below_is_no():
    assert classify("Will BTC rise above $100,000?", 99999.99, previous_close=90000).outcome == Outcome.NO


def test_price_target_equal_is_yes():
    assert classify("Will TSLA hit 250?", 250.0).outcome == Outcome.YES


def test_percent_change_rule():
    yes = classify("will rise by 2% today", 102.5, open_price=100)
    no = classify("will rise by 2% today", 101.5, open_price=100)
    assert (yes.outcome, yes.rule) == (Outcome.YES, "percent_change_vs_open")
    assert no.outcome == Outcome.NO


def test_negative_percent_change_rule():
    assert classify("Will it move -3% or better?", 98.0, open_price=100).outcome == Outcome.YES
    assert classify("Will it move -3% or better?", 96.0, open_price=100).outcome == Outcome.NO


def test_percent_without_open_falls_through():
    result = classify("will rise by 2% today", 101.0, previous_close=100)
    assert result.rule == "direction_vs_previous_close"
    assert result.outcome == Outcome.YES


def test_close_higher_rule_uses_open():
    assert classify("Will AAPL close higher today?", 151.2, open_price=150).outcome == Outcome.YES
    result = classify("Will AAPL be closing today higher?", 150.0, open_price=150)
    assert result.rule == "close_higher_vs_open"
    assert result.outcome == Outcome.NO


def test_previous_close_rule():
    result = classify("Will MSFT go up tomorrow?", 410.0, previous_close=410.0)
    assert (result.outcome, result.rule, result.confidence) == (
        Outcome.YES,
        "direction_vs_previous_close",
        Confidence.MEDIUM,
    )
    assert classify("Will MSFT increase?", 409.0, previous_close=410.0).outcome == Outcome.NO


def test_cue_word_fallback_is_low_confidence():
    up = classify("Will DOGE rise this week?", 0.1)
    down = classify("Will DOGE fall this week?", 0.1)
    assert (up.outcome, up.confidence) == (Outcome.YES, Confidence.LOW)
    assert (down.outcome, down.rule) == (Outcome.NO, "direction_cue_word")


def test_word_matching_is_whole_word_and_case_insensitive():
    assert classify("Will the SETUP RISE?", 1.0).outcome == Outcome.YES
    assert classify("Will the setup hold?", 1.0).outcome == Outcome.NO
