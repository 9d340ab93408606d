"""Outcome classifier: natural-language YES/NO question + prices -> verdict.

Rules are tried in order and the first one that applies decides. Numeric
anchors (an explicit price target, a percentage move against the open, a
close-vs-open comparison) come before the previous-close comparison, and the
bare cue-word fallback comes last.
"""
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from market_resolver.db import Outcome
from market_resolver.utils import to_decimal

# "$97,000", "97000.50", "100000"; digits glued to letters or followed by "%" are not targets.
PRICE_TARGET_RE = re.compile(
    r"(?<![\w.,])[$€£]?\s?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?(?![\d.,]*\s*%)(?![\w])"
)
PERCENT_RE = re.compile(r"([+-]?\d+(?:\.\d+)?)%")
UP_WORD_RE = re.compile(r"\b(?:rise|up|higher|increase)\b", re.IGNORECASE)
CLOSE_HIGHER_RE = re.compile(r"\b(?:close|closing)\b.*\bhigher\b", re.IGNORECASE | re.DOTALL)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ClassifierInput:
    question: str
    price: Decimal
    open_price: Decimal | None = None
    previous_close: Decimal | None = None

    @classmethod
    def build(
        cls,
        question: str,
        price: float | Decimal,
        open_price: float | Decimal | None = None,
        previous_close: float | Decimal | None = None,
    ) -> "ClassifierInput":
        return cls(
            question=question or "",
            price=to_decimal(price),
            open_price=to_decimal(open_price) if open_price is not None else None,
            previous_close=(
                to_decimal(previous_close) if previous_close is not None else None
            ),
        )


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    rule: str
    confidence: Confidence
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Rule:
    """One row of the rule table: applies() gates, decide() produces the verdict."""

    name: str
    confidence: Confidence
    applies: Callable[[ClassifierInput], bool]
    decide: Callable[[ClassifierInput], tuple[Outcome, str]]


def parse_price_target(text: str) -> Decimal | None:
    """First explicit price target in the text, with thousands separators removed."""
    match = PRICE_TARGET_RE.search(text)
    if match is None:
        return None
    digits = match.group(1).replace(",", "")
    return Decimal(digits + (match.group(2) or ""))


def parse_percent(text: str) -> Decimal | None:
    """First signed percentage in the text as a fraction ("+2%" -> 0.02)."""
    match = PERCENT_RE.search(text)
    if match is None:
        return None
    return Decimal(match.group(1)) / 100


def _verdict(condition: bool) -> Outcome:
    return Outcome.YES if condition else Outcome.NO


def _decide_target(data: ClassifierInput) -> tuple[Outcome, str]:
    target = parse_price_target(data.question)
    return (
        _verdict(data.price >= target),
        f"Compared price {data.price} against target {target}",
    )


def _decide_percent(data: ClassifierInput) -> tuple[Outcome, str]:
    wanted = parse_percent(data.question)
    change = (data.price - data.open_price) / data.open_price
    return (
        _verdict(change >= wanted),
        f"Change {change:.6f} from open {data.open_price} against {wanted}",
    )


def _decide_close_higher(data: ClassifierInput) -> tuple[Outcome, str]:
    return (
        _verdict(data.price > data.open_price),
        f"Compared close {data.price} against open {data.open_price}",
    )


def _decide_previous_close(data: ClassifierInput) -> tuple[Outcome, str]:
    return (
        _verdict(data.price >= data.previous_close),
        f"Compared price {data.price} against previous close {data.previous_close}",
    )


def _decide_cue_word(data: ClassifierInput) -> tuple[Outcome, str]:
    found = UP_WORD_RE.search(data.question) is not None
    return (
        _verdict(found),
        "No usable reference price; decided on upward cue word only",
    )


RULES: tuple[Rule, ...] = (
    Rule(
        name="price_target",
        confidence=Confidence.HIGH,
        applies=lambda d: parse_price_target(d.question) is not None,
        decide=_decide_target,
    ),
    Rule(
        name="percent_change_vs_open",
        confidence=Confidence.HIGH,
        applies=lambda d: d.open_price is not None
        and d.open_price != 0
        and parse_percent(d.question) is not None,
        decide=_decide_percent,
    ),
    Rule(
        name="close_higher_vs_open",
        confidence=Confidence.HIGH,
        applies=lambda d: d.open_price is not None
        and CLOSE_HIGHER_RE.search(d.question) is not None,
        decide=_decide_close_higher,
    ),
    Rule(
        name="direction_vs_previous_close",
        confidence=Confidence.MEDIUM,
        applies=lambda d: d.previous_close is not None
        and UP_WORD_RE.search(d.question) is not None,
        decide=_decide_previous_close,
    ),
    Rule(
        name="direction_cue_word",
        confidence=Confidence.LOW,
        applies=lambda d: True,
        decide=_decide_cue_word,
    ),
)


def classify(
    question: str,
    price: float | Decimal,
    open_price: float | Decimal | None = None,
    previous_close: float | Decimal | None = None,
    rules: tuple[Rule, ...] = RULES,
) -> Classification:
    """Classify a question into YES or NO using the first applicable rule."""
    data = ClassifierInput.build(question, price, open_price, previous_close)
    for rule in rules:
        if rule.applies(data):
            outcome, note = rule.decide(data)
            return Classification(
                outcome=outcome, rule=rule.name, confidence=rule.confidence, notes=[note]
            )
    raise ValueError("No classification rule applied")  # unreachable with RULES
