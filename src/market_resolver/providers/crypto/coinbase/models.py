"""Models for the Coinbase spot price endpoint."""
from pydantic import BaseModel


class CoinbaseSpotAmount(BaseModel):
    """Inner ``data`` object; Coinbase usually sends the amount as a string."""

    amount: str | float
    base: str | None = None
    currency: str | None = None


class CoinbaseSpotPrice(BaseModel):
    """Response of /prices/{pair}/spot."""

    data: CoinbaseSpotAmount
