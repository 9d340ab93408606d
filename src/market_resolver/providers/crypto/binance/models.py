"""Models for the Binance spot ticker (request params and response)."""
from pydantic import BaseModel


class BinanceTickerPriceParams(BaseModel):
    """Params for /ticker/price."""

    symbol: str


class BinanceTickerPrice(BaseModel):
    """Response of /ticker/price; Binance usually sends the price as a string."""

    symbol: str
    price: str | float
