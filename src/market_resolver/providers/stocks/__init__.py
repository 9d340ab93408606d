"""Equity price feeds."""
from market_resolver.providers.stocks.yfinance import YFinanceProvider

__all__ = ["YFinanceProvider"]
