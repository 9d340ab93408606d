"""Yahoo Finance equity feed."""
from market_resolver.providers.stocks.yfinance.y_finance_provider import \
    YFinanceProvider

__all__ = ["YFinanceProvider"]
