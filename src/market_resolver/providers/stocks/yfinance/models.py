"""Field names read from yfinance ticker data, in order of preference."""
from pydantic import BaseModel


class YFinanceQuoteFields(BaseModel):
    """Keys tried on ``fast_info`` first, then on the full ``info`` dict."""

    last_fast: tuple[str, ...] = ("lastPrice", "last_price", "regularMarketPrice")
    open_fast: tuple[str, ...] = ("open", "regularMarketOpen")
    previous_close_fast: tuple[str, ...] = ("previousClose", "previous_close", "regularMarketPreviousClose")
    last_info: tuple[str, ...] = ("currentPrice", "regularMarketPrice")
    open_info: tuple[str, ...] = ("regularMarketOpen", "open")
    previous_close_info: tuple[str, ...] = ("regularMarketPreviousClose", "previousClose")
