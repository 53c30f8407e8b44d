"""
Correlation insights over historical Polymarket resolutions
"""
from hedgeboard.services.correlation.store import (
    ResolutionStore,
    get_resolution_store,
    to_csv,
)
from hedgeboard.services.correlation.model import (
    CorrelationModel,
    CorrelationInsight,
    Prediction,
    get_correlation_model,
    statistical_prediction,
)

__all__ = [
    "ResolutionStore",
    "get_resolution_store",
    "to_csv",
    "CorrelationModel",
    "CorrelationInsight",
    "Prediction",
    "get_correlation_model",
    "statistical_prediction",
]
