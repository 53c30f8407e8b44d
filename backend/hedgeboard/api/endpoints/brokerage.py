"""
Brokerage API Endpoints - holdings imported through SnapTrade

Every request carries the SnapTrade user in headers:
  x-snaptrade-user-id / x-snaptrade-user-secret
"""
import asyncio
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Body, Header, HTTPException, Query
from fastapi.responses import JSONResponse
from loguru import logger

from hedgeboard.services.brokers.snaptrade_service import (
    SnapTradeError,
    get_snaptrade_service,
    position_to_holding,
)

router = APIRouter()

REFRESH_SETTLE_SECONDS = 2


def _require_credentials(user_id: Optional[str], user_secret: Optional[str]):
    if not user_id or not user_secret:
        raise HTTPException(status_code=401, detail="Missing SnapTrade credentials in headers")


def _snaptrade_error_response(error: SnapTradeError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error.message, "code": error.code})


def _clean_holding(holding: dict) -> dict:
    return {
        "ticker": str(holding.get("ticker") or "UNKNOWN"),
        "shares": float(holding.get("shares") or 0),
        "currentValue": float(holding.get("currentValue") or 0),
        "averagePrice": float(holding["averagePrice"]) if holding.get("averagePrice") else None,
        "currency": str(holding.get("currency") or "USD"),
    }


async def _all_holdings_payload(user_id: str, user_secret: str) -> dict:
    result = await get_snaptrade_service().get_all_holdings(user_id, user_secret)
    return {
        "holdings": [_clean_holding(h) for h in result["holdings"]],
        "accounts": [a.to_dict() for a in result["accounts"]],
        "lastSynced": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/snaptrade/holdings")
async def get_holdings(
    account_id: Optional[str] = Query(None, alias="accountId"),
    user_id: Optional[str] = Header(None, alias="x-snaptrade-user-id"),
    user_secret: Optional[str] = Header(None, alias="x-snaptrade-user-secret"),
):
    """
    Holdings from connected brokerages, aggregated by ticker, or the raw
    positions of one account when accountId is given.
    """
    _require_credentials(user_id, user_secret)

    try:
        if account_id:
            positions = await get_snaptrade_service().get_account_holdings(user_id, user_secret, account_id)
            return {
                "holdings": [position_to_holding(p) for p in positions],
                "accountId": account_id,
            }

        return await _all_holdings_payload(user_id, user_secret)

    except SnapTradeError as e:
        logger.error(f"Failed to fetch holdings: {e}")
        return _snaptrade_error_response(e)


@router.post("/snaptrade/holdings")
async def refresh_holdings(
    body: Optional[dict] = Body(None),
    user_id: Optional[str] = Header(None, alias="x-snaptrade-user-id"),
    user_secret: Optional[str] = Header(None, alias="x-snaptrade-user-secret"),
):
    """Force a brokerage sync, then return the refreshed holdings."""
    _require_credentials(user_id, user_secret)
    account_id = (body or {}).get("accountId")

    try:
        await get_snaptrade_service().refresh_holdings(user_id, user_secret, account_id)
        # Give SnapTrade a moment to pull from the brokerage
        await asyncio.sleep(REFRESH_SETTLE_SECONDS)
        payload = await _all_holdings_payload(user_id, user_secret)
    except SnapTradeError as e:
        logger.error(f"Failed to refresh holdings: {e}")
        return _snaptrade_error_response(e)

    payload["refreshed"] = True
    return payload
