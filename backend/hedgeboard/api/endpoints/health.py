"""
Health monitoring API endpoints.

Dependency checks for the monitoring UI: Redis, Groq, SnapTrade and the
resolution cache.
"""
import time

from fastapi import APIRouter
from loguru import logger

from hedgeboard.services.ai.groq_service import get_groq_service
from hedgeboard.services.brokers.snaptrade_service import get_snaptrade_service
from hedgeboard.services.cache import cache
from hedgeboard.services.correlation.store import get_resolution_store

router = APIRouter()

_started_at = time.monotonic()


def check_dependencies() -> dict:
    """Per-dependency status; only Redis has latency worth measuring."""
    start = time.monotonic()
    redis_ok = cache.ping()
    redis_latency_ms = round((time.monotonic() - start) * 1000, 1)

    store = get_resolution_store()
    pairs = len(store.data.pairs)

    return {
        "redis": {"status": "ok" if redis_ok else "down", "latency_ms": redis_latency_ms},
        "groq": {"status": "ok" if get_groq_service().is_available() else "not_configured"},
        "snaptrade": {"status": "ok" if get_snaptrade_service().is_configured else "not_configured"},
        "resolutions": {"status": "ok" if pairs else "empty", "pairs": pairs, "path": str(store.path)},
    }


def overall_status(deps: dict) -> str:
    """Degraded when anything is missing; the API still serves without Redis."""
    if all(d["status"] == "ok" for d in deps.values()):
        return "healthy"
    return "degraded"


def get_uptime_seconds() -> float:
    return time.monotonic() - _started_at


@router.get("/dependencies")
async def get_dependencies():
    """Check all dependencies."""
    try:
        return check_dependencies()
    except Exception as e:
        logger.error(f"Dependency check error: {e}")
        return {"error": str(e)}
