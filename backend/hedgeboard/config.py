"""
Application configuration
"""
from pydantic_settings import BaseSettings
from pydantic import model_validator
from functools import lru_cache
from typing import List
from dotenv import dotenv_values


class Settings(BaseSettings):
    # Redis
    REDIS_URL: str = ""  # Full Redis URL (e.g. redis://default:pw@host:port)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    # Groq LLM (OpenAI-compatible chat completions)
    GROQ_API_KEY: str = ""  # Get from: https://console.groq.com/keys
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"

    # Hedge analysis and news relevance walk this list in order
    GROQ_MODELS: List[str] = [
        "llama-3.3-70b-versatile",
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "moonshotai/kimi-k2-instruct",
        "qwen/qwen3-32b",
        "llama-3.1-8b-instant",
    ]

    # Correlation matching prefers the fast/cheap models first
    GROQ_CORRELATION_MODELS: List[str] = [
        "llama-3.1-8b-instant",
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "qwen3-32b",
        "llama-3.3-70b-versatile",
        "meta-llama/llama-4-maverick-17b-128e-instruct",
        "gpt-oss-20b-128k",
        "gpt-oss-120b-128k",
        "gpt-oss-safeguard-20b",
        "kimi-k2-0905",
    ]
    GROQ_TIMEOUT_SECONDS: float = 30.0

    # SnapTrade (app-level credentials; user id/secret arrive per request)
    SNAPTRADE_CLIENT_ID: str = ""
    SNAPTRADE_CONSUMER_KEY: str = ""

    # Upstream APIs
    POLYMARKET_GAMMA_URL: str = "https://gamma-api.polymarket.com"
    YAHOO_FINANCE_URL: str = "https://query1.finance.yahoo.com"

    # Resolution backfill
    RESOLUTIONS_PATH: str = "data/resolutions.json"
    BACKFILL_YEARS_BACK: int = 3
    BACKFILL_PAGE_SIZE: int = 100
    BACKFILL_MAX_OFFSET: int = 10000
    BACKFILL_MAX_EVENTS: int = 500
    BACKFILL_PAGE_DELAY_SECONDS: float = 0.15
    BACKFILL_PRICE_DELAY_SECONDS: float = 0.3

    # Cache TTLs (in seconds)
    CACHE_TTL_MARKETS: int = 300  # 5 minutes
    CACHE_TTL_CORRELATION: int = 1800  # 30 minutes

    # Redis log buffer served by /api/v1/logs
    LOG_BUFFER_KEY: str = "hedgeboard:logs"
    LOG_BUFFER_SIZE: int = 2000
    LOG_SINK_PAUSE_SECONDS: int = 60

    # Application
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Hedgeboard"

    # Deployment
    FRONTEND_URL: str = ""  # Production frontend URL, added to CORS automatically

    # CORS
    BACKEND_CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @model_validator(mode='after')
    def _fill_empty_from_dotenv(self):
        """
        If an env var exists but is empty (e.g. GROQ_API_KEY=''), fall
        back to the value from .env.  pydantic-settings treats a set-but-empty
        env var as authoritative, but for API keys an empty string is never
        intentional.
        """
        env_file_values = dotenv_values(".env")
        api_key_fields = [
            "GROQ_API_KEY", "SNAPTRADE_CLIENT_ID", "SNAPTRADE_CONSUMER_KEY",
        ]
        for field in api_key_fields:
            current = getattr(self, field, "")
            dotenv_val = env_file_values.get(field, "")
            if not current and dotenv_val:
                object.__setattr__(self, field, dotenv_val)
        # Add production frontend URL to CORS origins if set
        if self.FRONTEND_URL and self.FRONTEND_URL not in self.BACKEND_CORS_ORIGINS:
            self.BACKEND_CORS_ORIGINS.append(self.FRONTEND_URL)
        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
