"""
Recent application logs from the Redis buffer filled by the log sink.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.services.log_sink import LEVELS, level_at_least, read_entries

router = APIRouter()


@router.get("")
async def get_logs(
    level: Optional[str] = Query(None, description="Minimum level (DEBUG, INFO, WARNING, ERROR)"),
    component: Optional[str] = Query(None, description="Component prefix, e.g. polymarket or ai"),
    search: Optional[str] = Query(None, description="Case-insensitive text in the message"),
    limit: int = Query(200, ge=1, le=1000),
):
    """
    Newest entries first. ``total`` counts every buffered entry that passes
    the filters, before ``limit`` is applied.
    """
    minimum = level.upper() if level else None
    if minimum is not None and minimum not in LEVELS:
        raise HTTPException(status_code=400, detail=f"Unknown level '{level}'")

    filtered = bool(minimum or component or search)
    try:
        entries = read_entries(get_settings().LOG_BUFFER_SIZE if filtered else limit)
    except Exception as e:
        logger.warning(f"Log buffer unavailable: {e}")
        return {"logs": [], "total": 0, "error": str(e)}

    if minimum:
        entries = [e for e in entries if level_at_least(e.get("level", ""), minimum)]
    if component:
        prefix = component.lower()
        entries = [e for e in entries if str(e.get("component", "")).lower().startswith(prefix)]
    if search:
        needle = search.lower()
        entries = [e for e in entries if needle in str(e.get("msg", "")).lower()]

    return {"logs": entries[:limit], "total": len(entries)}
