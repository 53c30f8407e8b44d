"""
Hedge analysis - asks the LLM which open Polymarket markets hedge a portfolio.

Candidate markets are pre-ranked with the keyword matcher so the prompt
leads with markets that mention portfolio companies; the model's answer is
normalized into HedgeRecommendation records.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.data.company_mappings import get_mapping
from hedgeboard.models.resolution import ResolvedEvent
from hedgeboard.services.ai.groq_service import AIAnalysisError, GroqService, get_groq_service
from hedgeboard.services.ai.prompts import (
    HEDGE_SYSTEM_PROMPT,
    HEDGE_ANALYSIS_PROMPT,
    format_portfolio_lines,
    format_markets_list,
)
from hedgeboard.services.matching.matcher import match_event_to_stocks
from hedgeboard.services.matching.topics import extract_topic
from hedgeboard.services.polymarket.gamma import PolymarketService, get_polymarket_service


ACTIVE_MARKETS_LIMIT = 200
MAX_CANDIDATE_MARKETS = 60

DEFAULT_PROBABILITY = 0.5
DEFAULT_ALLOCATION = 100
DEFAULT_SUMMARY = "Analysis complete."


class HedgeAnalysisError(AIAnalysisError):
    """No model produced a usable hedge analysis."""
    def __init__(self, message: str = "All models failed or rate limited. Please try again later."):
        super().__init__(message)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class HedgeRecommendation:
    market: str
    market_url: str
    outcome: str
    probability: float
    position: str  # YES / NO
    reasoning: str
    hedges_against: str
    suggested_allocation: float
    affected_stocks: List[str]
    confidence: str  # high / medium
    end_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "market": self.market,
            "marketUrl": self.market_url,
            "outcome": self.outcome,
            "probability": self.probability,
            "position": self.position,
            "reasoning": self.reasoning,
            "hedgesAgainst": self.hedges_against,
            "suggestedAllocation": self.suggested_allocation,
            "affectedStocks": self.affected_stocks,
            "confidence": self.confidence,
        }
        if self.end_date:
            data["endDate"] = self.end_date
        return data


@dataclass
class HedgeAnalysis:
    summary: str
    recommendations: List[HedgeRecommendation] = field(default_factory=list)
    stocks_without_hedges: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "stocksWithoutHedges": self.stocks_without_hedges,
        }


# =============================================================================
# NORMALIZATION
# =============================================================================

def _number_or(value: Any, default: float) -> float:
    """Numeric value, or ``default`` when missing, zero or not a number."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    return number


def normalize_recommendation(rec: Dict[str, Any]) -> HedgeRecommendation:
    affected = rec.get("affectedStocks")
    if isinstance(affected, list):
        affected_stocks = [str(s) for s in affected if s is not None and str(s)]
    else:
        affected_stocks = []

    return HedgeRecommendation(
        market=str(rec.get("market") or ""),
        market_url="",
        outcome=str(rec.get("outcome") or rec.get("position") or "Yes"),
        probability=_number_or(rec.get("probability"), DEFAULT_PROBABILITY),
        position="NO" if rec.get("position") == "NO" else "YES",
        reasoning=str(rec.get("reasoning") or ""),
        hedges_against=str(rec.get("hedgesAgainst") or ""),
        suggested_allocation=_number_or(rec.get("suggestedAllocation"), DEFAULT_ALLOCATION),
        affected_stocks=affected_stocks,
        confidence="medium" if rec.get("confidence") == "medium" else "high",
    )


def _market_key(question: str) -> str:
    return " ".join(question.lower().split())


def normalize_analysis(parsed: Dict[str, Any], markets: List[Dict[str, Any]]) -> HedgeAnalysis:
    """
    Turn the model's JSON into a HedgeAnalysis.

    Recommendations are ordered by how many stocks they cover; a market
    recommended twice keeps its first (widest) entry. URLs and end dates
    come from the candidate list, matched on the market question.
    """
    raw = parsed.get("recommendations")
    recommendations = [
        normalize_recommendation(r) for r in (raw if isinstance(raw, list) else [])
        if isinstance(r, dict)
    ]
    recommendations.sort(key=lambda r: len(r.affected_stocks), reverse=True)

    by_question = {_market_key(m["question"]): m for m in markets if m.get("question")}

    deduped = []
    seen = set()
    for rec in recommendations:
        key = _market_key(rec.market)
        if key in seen:
            continue
        seen.add(key)

        market = by_question.get(key)
        if market:
            rec.market_url = market.get("url") or ""
            rec.end_date = market.get("end_date")
        deduped.append(rec)

    without = parsed.get("stocksWithoutHedges")
    return HedgeAnalysis(
        summary=parsed.get("summary") or DEFAULT_SUMMARY,
        recommendations=deduped,
        stocks_without_hedges=[str(s) for s in without] if isinstance(without, list) else [],
    )


# =============================================================================
# ANALYZER
# =============================================================================

def select_candidate_markets(
    markets: List[Dict[str, Any]],
    tickers: List[str],
    limit: int = MAX_CANDIDATE_MARKETS,
) -> List[Dict[str, Any]]:
    """
    Markets whose text matches portfolio tickers come first (most overlap
    first), then the remaining markets in their original volume order.
    """
    portfolio = {t.upper() for t in tickers}
    scored = []
    for index, market in enumerate(markets):
        question = market.get("question") or ""
        description = market.get("description") or ""
        event = ResolvedEvent(
            event_id=market.get("id") or "",
            title=question,
            slug=market.get("slug") or "",
            description=description,
            resolution_date=market.get("end_date") or "",
            outcome="UNKNOWN",
            final_probability=None,
            topic=extract_topic(question, description).value,
        )
        overlap = {m.ticker for m in match_event_to_stocks(event)} & portfolio
        scored.append((len(overlap), index, market))

    scored.sort(key=lambda item: (-item[0], item[1]))
    return [market for _, _, market in scored[:limit]]


class HedgeAnalyzer:
    """Finds Polymarket hedges for a list of {ticker, shares} holdings."""

    def __init__(self, groq: GroqService = None, polymarket: PolymarketService = None):
        self.settings = get_settings()
        self.groq = groq or get_groq_service()
        self.polymarket = polymarket or get_polymarket_service()

    @staticmethod
    def normalize_portfolio(portfolio: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        holdings = []
        for item in portfolio:
            ticker = str(item.get("ticker") or "").strip().upper()
            if not ticker:
                continue
            mapping = get_mapping(ticker)
            holdings.append({
                "ticker": ticker,
                "shares": item.get("shares", 0),
                "name": mapping["names"][0] if mapping else ticker,
            })
        return holdings

    def build_context(self, holdings: List[Dict[str, Any]], markets: List[Dict[str, Any]]) -> str:
        return (
            f"Portfolio stocks:\n{format_portfolio_lines(holdings)}\n\n"
            f"Available Polymarket markets:\n{format_markets_list(markets)}"
        )

    async def analyze(self, portfolio: List[Dict[str, Any]]) -> HedgeAnalysis:
        holdings = self.normalize_portfolio(portfolio)
        tickers = [h["ticker"] for h in holdings]

        cache_key = "hedge:" + ",".join(sorted(f"{h['ticker']}={h['shares']}" for h in holdings))
        cached = self.groq.get_cached(cache_key, "hedge_analysis")
        if cached:
            return cached

        markets = await self.polymarket.fetch_active_markets(limit=ACTIVE_MARKETS_LIMIT)
        candidates = select_candidate_markets(markets, tickers)
        logger.info(f"Hedge analysis: {len(tickers)} stocks, {len(candidates)} candidate markets")

        prompt = HEDGE_ANALYSIS_PROMPT.format(context=self.build_context(holdings, candidates))

        # Unparseable output counts as a failed model, so walk the list here
        for model in self.settings.GROQ_MODELS:
            content, _ = await self.groq.complete(
                prompt,
                system_prompt=HEDGE_SYSTEM_PROMPT,
                models=[model],
                temperature=0.3,
                max_tokens=2500,
            )
            if content is None:
                continue

            parsed = self.groq.parser.extract_json(content)
            if parsed is None:
                logger.warning(f"Could not parse JSON from {model} response")
                continue

            analysis = normalize_analysis(parsed, candidates)
            logger.info(f"Hedge analysis produced {len(analysis.recommendations)} recommendations")
            self.groq.set_cached(cache_key, analysis)
            return analysis

        raise HedgeAnalysisError()


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_hedge_analyzer: Optional[HedgeAnalyzer] = None


def get_hedge_analyzer() -> HedgeAnalyzer:
    """Get the global hedge analyzer."""
    global _hedge_analyzer
    if _hedge_analyzer is None:
        _hedge_analyzer = HedgeAnalyzer()
    return _hedge_analyzer
