"""Shared utilities for price feeds: symbol shapes and numeric coercion."""
import math
from typing import Any

CRYPTO_QUOTE_SUFFIXES = ("USDT", "USDC", "BUSD", "USD")
_PAIR_SEPARATORS = ("-", "/", "_")


def normalize_stock_symbol(symbol: str) -> str:
    """Normalize a stock ticker (uppercase, trimmed)."""
    return symbol.strip().upper()


def looks_like_crypto(symbol: str) -> bool:
    """True when the symbol carries a common crypto quote-currency suffix."""
    compact = _compact(symbol)
    return any(
        compact.endswith(suffix) and len(compact) > len(suffix)
        for suffix in CRYPTO_QUOTE_SUFFIXES
    )


def crypto_base_asset(symbol: str) -> str:
    """Strip separators and the quote-currency suffix: "btc-usd" -> "BTC"."""
    compact = _compact(symbol)
    for suffix in CRYPTO_QUOTE_SUFFIXES:
        if compact.endswith(suffix) and len(compact) > len(suffix):
            return compact[: -len(suffix)]
    return compact


def binance_pair(symbol: str) -> str:
    """Binance spot pair format, e.g. "BTCUSDT"."""
    return f"{crypto_base_asset(symbol)}USDT"


def coinbase_pair(symbol: str) -> str:
    """Coinbase product format, e.g. "BTC-USD"."""
    return f"{crypto_base_asset(symbol)}-USD"


def positive_float(value: Any) -> float | None:
    """Coerce an upstream value to a positive finite float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def _compact(symbol: str) -> str:
    compact = symbol.strip().upper()
    for sep in _PAIR_SEPARATORS:
        compact = compact.replace(sep, "")
    return compact
