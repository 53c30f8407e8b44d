"""
Hedgeboard - FastAPI Application
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.api.endpoints import correlation, hedges, news, brokerage
from hedgeboard.api.endpoints import logs as logs_endpoints
from hedgeboard.api.endpoints import health as health_endpoints
from hedgeboard.services.ai.groq_service import initialize_groq_service
from hedgeboard.services.correlation.store import get_resolution_store

app_settings = get_settings()

# Mirror INFO and above into Redis for /api/v1/logs
from hedgeboard.services.log_sink import redis_log_sink
try:
    logger.add(redis_log_sink, level="INFO", format="{message}")
    logger.info("Redis log sink registered")
except Exception as e:
    logger.warning(f"Failed to register Redis log sink: {e}")

# Create FastAPI app
app = FastAPI(
    title=app_settings.PROJECT_NAME,
    version="1.0.0",
    description="Hedge stock portfolios with Polymarket prediction markets"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    correlation.router,
    prefix=f"{app_settings.API_V1_PREFIX}/correlation",
    tags=["correlation"]
)

app.include_router(
    hedges.router,
    prefix=f"{app_settings.API_V1_PREFIX}/hedges",
    tags=["hedges"]
)

app.include_router(
    news.router,
    prefix=f"{app_settings.API_V1_PREFIX}/news",
    tags=["news"]
)

app.include_router(
    brokerage.router,
    prefix=f"{app_settings.API_V1_PREFIX}/brokerage",
    tags=["brokerage"]
)

# Logs endpoint (Redis log buffer viewer)
app.include_router(
    logs_endpoints.router,
    prefix=f"{app_settings.API_V1_PREFIX}/logs",
    tags=["logs"],
)

app.include_router(
    health_endpoints.router,
    prefix=f"{app_settings.API_V1_PREFIX}/health",
    tags=["health"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Hedgeboard API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """
    Health check with dependency status. Always 200: every dependency is
    optional, the API degrades instead of failing.
    """
    try:
        deps = health_endpoints.check_dependencies()
        return {
            "status": health_endpoints.overall_status(deps),
            "service": "hedgeboard-api",
            "uptime_seconds": round(health_endpoints.get_uptime_seconds(), 0),
            "dependencies": deps,
        }
    except Exception as e:
        logger.error(f"Health check error: {e}")
        return {"status": "healthy", "service": "hedgeboard-api"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.on_event("startup")
async def startup_event():
    """Run on application startup"""
    logger.info("Starting Hedgeboard API...")
    logger.info(f"Redis: {app_settings.REDIS_HOST}:{app_settings.REDIS_PORT}")

    if initialize_groq_service():
        logger.info("Groq LLM enabled")
    else:
        logger.info("Groq LLM not configured (hedges and news disabled)")

    store = get_resolution_store()
    logger.info(f"Resolution cache: {len(store.data.pairs)} pairs from {store.path}")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown"""
    logger.info("Shutting down Hedgeboard API...")

    # Close all aiohttp sessions to prevent resource leaks
    from hedgeboard.services.polymarket.gamma import get_polymarket_service
    from hedgeboard.services.market_data.yahoo import get_yahoo_service

    sessions_closed = 0
    for service in (get_polymarket_service(), get_yahoo_service()):
        try:
            await service.close()
            sessions_closed += 1
        except Exception as e:
            logger.warning(f"Failed to close session: {e}")
    if sessions_closed:
        logger.info(f"Closed {sessions_closed} aiohttp session(s)")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hedgeboard.main:app", host="0.0.0.0", port=8000, reload=True)
