"""Shared utilities for the market resolver."""

from datetime import datetime, timezone
from decimal import Decimal


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the store keeps naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert a numeric value to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
