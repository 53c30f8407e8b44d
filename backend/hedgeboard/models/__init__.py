"""
Domain records for resolution backfill and correlation
"""
from hedgeboard.models.resolution import (
    ResolvedEvent,
    StockMatch,
    StockPrice,
    EventStockPair,
    BackfillData,
)

__all__ = [
    "ResolvedEvent",
    "StockMatch",
    "StockPrice",
    "EventStockPair",
    "BackfillData",
]
