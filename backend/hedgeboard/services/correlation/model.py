"""
Correlation model - historical backing for a hedge recommendation.

Given a bet title and the tickers it affects:
  1. Find similar resolved bets in the resolution cache (LLM ranking,
     keyword fallback)
  2. Summarize them as a CorrelationInsight (YES/NO counts, confidence boost)
  3. Estimate the bet's YES probability (LLM, statistical fallback)
"""

import hashlib
import json
import re
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.services.ai.groq_service import GroqService, get_groq_service
from hedgeboard.services.ai.prompts import (
    SEMANTIC_MATCH_PROMPT,
    PREDICTION_PROMPT,
    format_bet_list,
    format_event_samples,
)
from hedgeboard.services.cache import cache, cache_key
from hedgeboard.services.correlation.store import ResolutionStore, get_resolution_store
from hedgeboard.services.matching.topics import EventTopic


MAX_LLM_CANDIDATES = 100
KEYWORD_FALLBACK_LIMIT = 10
MIN_KEYWORD_LENGTH = 3

# (minimum matches, confidence boost in percentage points)
CONFIDENCE_BOOST_TIERS = [(10, 35), (5, 30), (3, 25), (1, 15)]
MAX_CONFIDENCE_BOOST = 35

PREDICTION_RANGE = (0.05, 0.95)
CONFIDENCE_RANGE = (0.5, 0.95)

# Historical lean of each topic, added to the base YES ratio
TOPIC_ADJUSTMENTS = {
    EventTopic.REGULATORY: -0.05,
    EventTopic.GEOPOLITICAL: -0.08,
    EventTopic.PRODUCT_LAUNCH: -0.10,
    EventTopic.SAFETY_INCIDENT: 0.15,
    EventTopic.ELECTION: 0.0,
    EventTopic.AI_TECH: 0.05,
    EventTopic.CRYPTO: 0.08,
}

_PREDICTION_JSON = re.compile(r'\{[^}]+\}')


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return max(low, min(high, value))


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class Prediction:
    prediction: float
    confidence: float

    def to_dict(self) -> Dict[str, float]:
        return {"prediction": self.prediction, "confidence": self.confidence}


@dataclass
class CorrelationInsight:
    has_historical_data: bool
    match_count: int
    matched_events: List[Dict[str, Any]]
    confidence_boost: int
    insight: str
    yes_count: int
    no_count: int
    match_type: str  # topic / none
    detected_topic: str
    avg_outcome: Optional[str] = None
    prediction: Optional[Prediction] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "hasHistoricalData": self.has_historical_data,
            "matchCount": self.match_count,
            "matchedEvents": self.matched_events,
            "confidenceBoost": self.confidence_boost,
            "insight": self.insight,
            "yesCount": self.yes_count,
            "noCount": self.no_count,
            "matchType": self.match_type,
            "detectedTopic": self.detected_topic,
        }
        if self.avg_outcome is not None:
            data["avgOutcome"] = self.avg_outcome
        if self.prediction is not None:
            # Key name is what the dashboard reads
            data["woodWidePrediction"] = self.prediction.to_dict()
        return data


# =============================================================================
# SCORING
# =============================================================================

def confidence_boost_for(match_count: int) -> int:
    for minimum, boost in CONFIDENCE_BOOST_TIERS:
        if match_count >= minimum:
            return min(MAX_CONFIDENCE_BOOST, boost)
    return 0


def build_insight(matches: List[Dict[str, Any]], detected_topic: str) -> CorrelationInsight:
    """Summarize matched bets; duplicates by title keep the first (best ranked)."""
    unique = []
    seen_titles = set()
    for match in matches:
        if match["title"] in seen_titles:
            continue
        seen_titles.add(match["title"])
        unique.append({
            "title": match["title"],
            "outcome": match["outcome"],
            "ticker": match["ticker"],
            "priceOnResolution": match["price"],
            "resolutionDate": match["date"],
        })

    yes_count = sum(1 for m in unique if m["outcome"] == "YES")
    no_count = sum(1 for m in unique if m["outcome"] == "NO")
    match_count = len(unique)

    if match_count == 0:
        insight = "No semantically similar bets found in historical data."
        avg_outcome = None
    else:
        insight = (
            f"Found {match_count} similar bets. "
            f"{yes_count} resolved YES, {no_count} resolved NO."
        )
        avg_outcome = "YES" if yes_count > no_count else "NO"

    return CorrelationInsight(
        has_historical_data=match_count > 0,
        match_count=match_count,
        matched_events=unique,
        confidence_boost=confidence_boost_for(match_count),
        insight=insight,
        yes_count=yes_count,
        no_count=no_count,
        match_type="topic" if match_count > 0 else "none",
        detected_topic=detected_topic,
        avg_outcome=avg_outcome,
    )


def title_variation(title: str) -> float:
    """Deterministic per-title nudge in [-0.10, +0.09]."""
    return ((sum(ord(c) for c in title) % 20) - 10) / 100


def statistical_prediction(bet_title: str, insight: CorrelationInsight) -> Prediction:
    """YES ratio of the matches, nudged by title hash and topic lean."""
    base = insight.yes_count / insight.match_count if insight.match_count > 0 else 0.5

    try:
        topic_adjustment = TOPIC_ADJUSTMENTS.get(EventTopic(insight.detected_topic), 0.0)
    except ValueError:
        topic_adjustment = 0.0

    prediction = _clamp(base + title_variation(bet_title) + topic_adjustment, PREDICTION_RANGE)

    if insight.match_type == "topic":
        confidence = min(0.90, 0.6 + insight.match_count * 0.02)
    else:
        confidence = min(0.75, 0.5 + insight.match_count * 0.01)

    return Prediction(prediction=prediction, confidence=confidence)


def keyword_matches(current_bet: str, bets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Bets whose title contains any word (4+ chars) of the current bet."""
    words = [w for w in current_bet.lower().split() if len(w) > MIN_KEYWORD_LENGTH]
    if not words:
        return []

    hits = [b for b in bets if any(w in b["title"].lower() for w in words)]
    return [
        {**bet, "similarity": round(0.6 - i * 0.05, 2)}
        for i, bet in enumerate(hits[:KEYWORD_FALLBACK_LIMIT])
    ]


def _relevant_bets(bets: List[Dict[str, Any]], affected_tickers: List[str]) -> List[Dict[str, Any]]:
    tickers = {t.upper() for t in affected_tickers}
    return [b for b in bets if b["ticker"].upper() in tickers]


# =============================================================================
# MODEL
# =============================================================================

class CorrelationModel:
    """Correlation insights backed by the resolution cache and Groq."""

    def __init__(self, store: ResolutionStore = None, groq: GroqService = None):
        self.settings = get_settings()
        self.store = store or get_resolution_store()
        self.groq = groq or get_groq_service()

    async def find_semantic_matches(
        self,
        current_bet: str,
        historical_bets: List[Dict[str, Any]],
        affected_tickers: List[str],
    ) -> List[Dict[str, Any]]:
        """
        Historical bets on the affected tickers that resemble ``current_bet``.

        The LLM ranks up to MAX_LLM_CANDIDATES numbered bets; when it is
        unavailable or finds nothing, title keyword overlap is used instead.
        Each result carries a ``similarity`` that decreases with rank.
        """
        if not self.groq.is_available() or not historical_bets:
            return []

        relevant = _relevant_bets(historical_bets, affected_tickers)
        if not relevant:
            return []

        candidates = relevant[:MAX_LLM_CANDIDATES]
        prompt = SEMANTIC_MATCH_PROMPT.format(
            current_bet=current_bet,
            bet_list=format_bet_list(candidates),
        )

        results = []
        content, _ = await self.groq.complete(
            prompt,
            models=self.settings.GROQ_CORRELATION_MODELS,
            temperature=0.1,
            max_tokens=200,
        )
        if content:
            indices = [i for i in self.groq.parser.extract_index_list(content) if 1 <= i <= len(relevant)]
            results = [
                {**relevant[idx - 1], "similarity": round(1 - rank * 0.1, 2)}
                for rank, idx in enumerate(indices)
            ]

        if not results:
            logger.info("LLM found no similar bets, using keyword fallback")
            results = keyword_matches(current_bet, relevant)
            if results:
                logger.info(f"Keyword fallback found {len(results)} matches")

        logger.info(f"Found {len(results)} similar historical bets")
        return results

    async def find_historical_matches_async(
        self,
        bet_title: str,
        bet_description: str,
        affected_tickers: List[str],
    ) -> CorrelationInsight:
        logger.info(f"Correlation analysis: '{bet_title[:50]}'")
        matches = await self.find_semantic_matches(
            bet_title, self.store.get_all_historical_bets(), affected_tickers
        )
        # Semantic matches carry no topic
        return build_insight(matches, EventTopic.OTHER.value)

    def find_historical_matches(
        self,
        bet_title: str,
        bet_description: str,
        affected_tickers: List[str],
    ) -> CorrelationInsight:
        """Quick synchronous match on title keywords only; no LLM call."""
        relevant = _relevant_bets(self.store.get_all_historical_bets(), affected_tickers)
        matches = keyword_matches(bet_title, relevant)
        return build_insight(matches, EventTopic.OTHER.value)

    async def generate_prediction(
        self,
        bet_title: str,
        insight: CorrelationInsight,
        affected_tickers: List[str],
    ) -> Prediction:
        """LLM probability estimate, clamped; statistical fallback on any failure."""
        if not self.groq.is_available():
            return statistical_prediction(bet_title, insight)

        prompt = PREDICTION_PROMPT.format(
            bet_title=bet_title,
            tickers=", ".join(affected_tickers),
            topic=insight.detected_topic,
            match_type="Strong topic match" if insight.match_type == "topic" else "General ticker correlation",
            match_count=insight.match_count,
            yes_count=insight.yes_count,
            no_count=insight.no_count,
            event_samples=format_event_samples(insight.matched_events),
        )

        content, _ = await self.groq.complete(
            prompt,
            models=self.settings.GROQ_CORRELATION_MODELS,
            temperature=0.1,
            max_tokens=100,
        )
        match = _PREDICTION_JSON.search(content or "")
        if match:
            try:
                parsed = json.loads(match.group(0))
                prediction = Prediction(
                    prediction=_clamp(float(parsed.get("prediction") or 0.5), PREDICTION_RANGE),
                    confidence=_clamp(float(parsed.get("confidence") or 0.7), CONFIDENCE_RANGE),
                )
                logger.info(f"LLM prediction: {prediction}")
                return prediction
            except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Unusable prediction from LLM ({e}), using statistical prediction")

        return statistical_prediction(bet_title, insight)

    async def get_correlation_insights(
        self,
        bet_title: str,
        bet_description: str,
        affected_tickers: List[str],
    ) -> Dict[str, Any]:
        """Historical matches plus a prediction when any were found. Cached in Redis."""
        digest = hashlib.md5(
            f"{bet_title}|{bet_description}|{','.join(sorted(t.upper() for t in affected_tickers))}".encode()
        ).hexdigest()
        key = cache_key("correlation", digest)
        cached = cache.get(key)
        if cached:
            return cached

        insight = await self.find_historical_matches_async(bet_title, bet_description, affected_tickers)
        if insight.has_historical_data:
            insight.prediction = await self.generate_prediction(bet_title, insight, affected_tickers)

        result = insight.to_dict()
        cache.set(key, result, ttl=self.settings.CACHE_TTL_CORRELATION)
        return result


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_correlation_model: Optional[CorrelationModel] = None


def get_correlation_model() -> CorrelationModel:
    """Get the global correlation model."""
    global _correlation_model
    if _correlation_model is None:
        _correlation_model = CorrelationModel()
    return _correlation_model
