"""
News API Endpoints - recent news for a portfolio or a selected bet
"""
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.services.news.news_service import get_news_service

router = APIRouter()


class NewsHolding(BaseModel):
    ticker: str
    shares: float = 0


class NewsRequest(BaseModel):
    """Request body for portfolio news."""
    model_config = ConfigDict(populate_by_name=True)

    portfolio: Optional[List[NewsHolding]] = None
    bet_market: Optional[str] = Field(None, alias="betMarket")


@router.post("")
async def get_news(request: NewsRequest):
    """
    Relevant articles from the past week.

    With betMarket, bet-specific searches are added and results are ordered
    by how closely they address the bet.
    """
    if not request.portfolio:
        raise HTTPException(status_code=400, detail="Portfolio is required")

    if not get_settings().GROQ_API_KEY:
        raise HTTPException(
            status_code=500,
            detail="Groq API key not configured. Add GROQ_API_KEY to .env",
        )

    try:
        articles = await get_news_service().get_news(
            [h.model_dump() for h in request.portfolio],
            bet_market=request.bet_market,
        )
    except Exception as e:
        logger.error(f"News fetch error: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch news")

    return {"articles": articles}
