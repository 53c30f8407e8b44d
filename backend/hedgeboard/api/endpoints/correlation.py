"""
Correlation API Endpoints - historical Polymarket resolutions behind a bet
"""
from typing import Optional, List
from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, Field
from loguru import logger

from hedgeboard.services.correlation.model import get_correlation_model
from hedgeboard.services.correlation.store import get_resolution_store, to_csv

router = APIRouter()


class CorrelationRequest(BaseModel):
    """Request body for correlation insights."""
    model_config = ConfigDict(populate_by_name=True)

    bet_title: Optional[str] = Field(None, alias="betTitle")
    bet_description: Optional[str] = Field("", alias="betDescription")
    affected_tickers: Optional[List[str]] = Field(default_factory=list, alias="affectedTickers")


@router.post("")
async def get_correlation(request: CorrelationRequest):
    """
    Correlation insight for a bet: similar resolved bets, YES/NO counts,
    confidence boost and (when matches exist) a probability estimate.
    """
    if not request.bet_title:
        raise HTTPException(status_code=400, detail="betTitle is required")

    try:
        return await get_correlation_model().get_correlation_insights(
            request.bet_title,
            request.bet_description or "",
            request.affected_tickers or [],
        )
    except Exception as e:
        logger.error(f"Correlation analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Correlation analysis failed")


@router.get("")
async def correlation_lookup(
    action: Optional[str] = Query(None, description="'stats' or 'quick-match'"),
    title: str = Query("", description="Bet title for quick-match"),
    tickers: Optional[str] = Query(None, description="Comma-separated tickers for quick-match"),
):
    """Resolution stats, or a quick keyword-only match without LLM calls."""
    if action == "stats":
        return get_resolution_store().get_resolution_stats()

    if action == "quick-match":
        ticker_list = tickers.split(",") if tickers else []
        return get_correlation_model().find_historical_matches(title, "", ticker_list).to_dict()

    raise HTTPException(status_code=400, detail="Invalid action. Use 'stats' or 'quick-match'")


@router.get("/training-data")
async def export_training_data():
    """Training rows (company, ticker, eventCategory, outcome, hadPriceData) as CSV."""
    rows = get_resolution_store().get_training_data()
    return Response(
        content=to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="polymarket_correlations.csv"'},
    )
