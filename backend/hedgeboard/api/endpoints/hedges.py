"""
Hedge API Endpoints - Polymarket hedges for a stock portfolio
"""
from typing import List
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from loguru import logger

from hedgeboard.services.ai.groq_service import get_groq_service
from hedgeboard.services.ai.hedge_analysis import HedgeAnalysisError, get_hedge_analyzer

router = APIRouter()


class Holding(BaseModel):
    ticker: str
    shares: float = 0


class HedgeRequest(BaseModel):
    """Request body for hedge analysis."""
    portfolio: List[Holding] = []


@router.post("/analyze")
async def analyze_hedges(request: HedgeRequest):
    """
    Recommend Polymarket positions that hedge the portfolio.

    Returns:
        summary, recommendations (widest coverage first) and
        stocksWithoutHedges
    """
    if not request.portfolio:
        raise HTTPException(status_code=400, detail="Portfolio is required")

    if not get_groq_service().is_available():
        raise HTTPException(status_code=503, detail="AI service not available. Add GROQ_API_KEY to .env")

    try:
        analysis = await get_hedge_analyzer().analyze([h.model_dump() for h in request.portfolio])
    except HedgeAnalysisError as e:
        logger.error(f"Hedge analysis failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return analysis.to_dict()


@router.get("/status")
async def get_hedge_status():
    """LLM availability and today's per-model usage."""
    return get_groq_service().get_usage_stats()
