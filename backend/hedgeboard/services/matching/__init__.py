"""
Event-to-stock matching and topic classification
"""
from hedgeboard.services.matching.topics import (
    EventTopic,
    extract_topic,
    extract_event_category,
)
from hedgeboard.services.matching.matcher import (
    is_valid_match,
    match_event_to_stocks,
)

__all__ = [
    "EventTopic",
    "extract_topic",
    "extract_event_category",
    "is_valid_match",
    "match_event_to_stocks",
]
