"""
Market data providers
"""
from hedgeboard.services.market_data.yahoo import (
    YahooFinanceService,
    get_yahoo_service,
)

__all__ = [
    "YahooFinanceService",
    "get_yahoo_service",
]
