"""
Broker integration services for importing portfolio holdings.
"""
from hedgeboard.services.brokers.snaptrade_service import (
    SnapTradeService,
    SnapTradeError,
    get_snaptrade_service,
)

__all__ = [
    "SnapTradeService",
    "SnapTradeError",
    "get_snaptrade_service",
]
