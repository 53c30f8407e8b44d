"""
AI Services - Groq-powered hedge analysis and matching

Enhanced with:
- Ordered model fallback across Groq models
- Tolerant JSON parsing of model output
- Caching with configurable TTLs
- Structured result types
"""
from hedgeboard.services.ai.groq_service import (
    GroqService,
    get_groq_service,
    initialize_groq_service,
    # Data classes
    TokenUsage,
    UsageTracker,
    CachedResponse,
    ResponseParser,
    # Exceptions
    AIAnalysisError,
)
from hedgeboard.services.ai.hedge_analysis import (
    HedgeAnalyzer,
    HedgeAnalysis,
    HedgeRecommendation,
    HedgeAnalysisError,
    get_hedge_analyzer,
)

__all__ = [
    # Service
    'GroqService',
    'get_groq_service',
    'initialize_groq_service',
    'HedgeAnalyzer',
    'get_hedge_analyzer',
    # Data classes
    'TokenUsage',
    'UsageTracker',
    'CachedResponse',
    'ResponseParser',
    'HedgeAnalysis',
    'HedgeRecommendation',
    # Exceptions
    'AIAnalysisError',
    'HedgeAnalysisError',
]
