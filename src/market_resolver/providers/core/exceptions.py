"""Errors raised when no feed can answer for a symbol."""


class PriceUnavailableError(Exception):
    """No feed returned a usable price for the requested symbol."""
