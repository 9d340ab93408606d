"""Yahoo Finance price feed for equities."""
import asyncio
import logging
from collections.abc import Callable
from typing import Any

import yfinance as yf

from market_resolver.providers.core import PriceFeedABC, positive_float
from market_resolver.providers.core.utils import normalize_stock_symbol
from market_resolver.providers.stocks.yfinance.models import \
    YFinanceQuoteFields
from market_resolver.schemas import PriceQuote

logger = logging.getLogger(__name__)

_FIELDS = YFinanceQuoteFields()


def _first_positive(source: Any, keys: tuple[str, ...]) -> float | None:
    if not source:
        return None
    for key in keys:
        try:
            value = positive_float(source.get(key))
        except Exception:  # pylint: disable=broad-except
            # fast_info computes some fields lazily and can raise on access
            value = None
        if value is not None:
            return value
    return None


class YFinanceProvider(PriceFeedABC):
    """Equity price feed via Yahoo Finance.

    Returns last price, session open and previous close. Any of the three may
    be None; a quote without any of them is reported as not found.
    No API key required. yfinance is synchronous, so calls run in a thread.
    """

    name = "yahoo"

    def __init__(self, ticker_factory: Callable[[str], Any] | None = None) -> None:
        """Initialize the YFinance provider.

        Args:
            ticker_factory: Builds a ticker object for a symbol; defaults to yf.Ticker.
        """
        self._ticker_factory = ticker_factory or yf.Ticker

    def _fetch_quote_sync(self, symbol: str) -> PriceQuote:
        """Fetch a single quote synchronously (run in thread)."""
        ticker = self._ticker_factory(symbol)
        fast = getattr(ticker, "fast_info", None)
        price = _first_positive(fast, _FIELDS.last_fast)
        open_price = _first_positive(fast, _FIELDS.open_fast)
        previous_close = _first_positive(fast, _FIELDS.previous_close_fast)

        if price is None or open_price is None or previous_close is None:
            info = self._full_info(ticker, symbol)
            price = price or _first_positive(info, _FIELDS.last_info)
            open_price = open_price or _first_positive(info, _FIELDS.open_info)
            previous_close = previous_close or _first_positive(
                info, _FIELDS.previous_close_info
            )

        if price is None and open_price is None and previous_close is None:
            raise ValueError(f"Stock '{symbol}' not found or has no price data")

        return PriceQuote(
            provider=self.name,
            symbol=symbol,
            price=price,
            open_price=open_price,
            previous_close=previous_close,
        )

    @staticmethod
    def _full_info(ticker: Any, symbol: str) -> dict:
        """Full info dict; an empty dict when Yahoo refuses the request."""
        try:
            return ticker.info or {}
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("yfinance info lookup failed for %s: %s", symbol, exc)
            return {}

    async def get_quote(self, symbol: str) -> PriceQuote:
        """Fetch last/open/previous-close for a stock symbol."""
        sym = normalize_stock_symbol(symbol)
        try:
            return await asyncio.to_thread(self._fetch_quote_sync, sym)
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"Failed to fetch quote for '{sym}': {e}") from e
