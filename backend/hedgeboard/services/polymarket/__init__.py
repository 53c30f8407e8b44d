"""
Polymarket prediction-market data
"""
from hedgeboard.services.polymarket.gamma import (
    PolymarketService,
    get_polymarket_service,
    parse_outcome_prices,
    resolve_outcome,
)

__all__ = [
    "PolymarketService",
    "get_polymarket_service",
    "parse_outcome_prices",
    "resolve_outcome",
]
