"""
Topic classification for prediction-market events.

Plain case-insensitive substring search over ordered keyword lists; the
first topic with a hit wins and ``other`` is the fallback.
"""
from enum import Enum

from hedgeboard.data.topic_keywords import TOPIC_KEYWORDS, EVENT_CATEGORY_KEYWORDS


class EventTopic(str, Enum):
    """Coarse topic assigned to an event."""
    REGULATORY = "regulatory"          # tariffs, bans, laws
    SAFETY_INCIDENT = "safety_incident"  # crashes, emergencies, recalls
    PRODUCT_LAUNCH = "product_launch"
    EXECUTIVE = "executive"            # CEO actions and statements
    LEGAL = "legal"                    # lawsuits, court cases
    FINANCIAL = "financial"            # earnings, IPOs, deals
    GEOPOLITICAL = "geopolitical"
    SOCIAL_MEDIA = "social_media"
    CRYPTO = "crypto"
    ENTERTAINMENT = "entertainment"
    AI_TECH = "ai_tech"
    ELECTION = "election"
    OTHER = "other"


def _event_text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def extract_topic(title: str, description: str = "") -> EventTopic:
    """Classify an event by the first topic whose keyword appears in its text."""
    text = _event_text(title, description)

    for topic, keywords in TOPIC_KEYWORDS:
        for keyword in keywords:
            if keyword.lower() in text:
                return EventTopic(topic)

    return EventTopic.OTHER


def extract_event_category(title: str, description: str = "") -> str:
    """Coarser category used as a feature in exported training rows."""
    text = _event_text(title, description)

    for category, keywords in EVENT_CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category

    return "general"
