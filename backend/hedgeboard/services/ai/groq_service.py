"""
Groq LLM Service - chat completions through Groq's OpenAI-compatible API

Enhanced with:
- Ordered model fallback (rate-limited or failing models are skipped)
- Tolerant JSON extraction from free-form model output
- In-memory response caching with per-type TTLs
- Per-model request and token accounting
"""

import json
import re
from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple
from dataclasses import dataclass, field
from loguru import logger

import openai
from openai import AsyncOpenAI

from hedgeboard.config import get_settings


# =============================================================================
# EXCEPTIONS
# =============================================================================

class AIAnalysisError(Exception):
    """Base exception for LLM analysis errors."""
    pass


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class TokenUsage:
    """Token usage for a single request."""
    input_tokens: int
    output_tokens: int
    model: str = ""

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class UsageTracker:
    """Requests and tokens per model for the current day."""
    day: str = ""
    requests: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, int] = field(default_factory=dict)
    tokens: Dict[str, int] = field(default_factory=dict)

    def _roll(self):
        today = datetime.now().date().isoformat()
        if today != self.day:
            self.day = today
            self.requests = {}
            self.failures = {}
            self.tokens = {}

    def record_success(self, usage: TokenUsage):
        self._roll()
        self.requests[usage.model] = self.requests.get(usage.model, 0) + 1
        self.tokens[usage.model] = self.tokens.get(usage.model, 0) + usage.total_tokens

    def record_failure(self, model: str):
        self._roll()
        self.failures[model] = self.failures.get(model, 0) + 1


@dataclass
class CachedResponse:
    """Cached API response with timestamp."""
    data: Any
    timestamp: datetime

    def is_expired(self, ttl_seconds: int) -> bool:
        """Check if cache entry has expired."""
        return (datetime.now() - self.timestamp).total_seconds() > ttl_seconds


# =============================================================================
# RESPONSE PARSER
# =============================================================================

class ResponseParser:
    """Pull JSON out of model output that may include prose or code fences."""

    @staticmethod
    def fix_json(json_str: str) -> str:
        """Repair the mistakes models commonly make in JSON output."""
        json_str = re.sub(r',(\s*[}\]])', r'\1', json_str)  # Trailing commas
        json_str = re.sub(r'[\x00-\x1F\x7F]', ' ', json_str)  # Control characters
        json_str = re.sub(r'\}(\s*)\{', r'},\1{', json_str)  # Missing commas between objects
        json_str = re.sub(r':\s*\.(\d)', r': 0.\1', json_str)  # .5 -> 0.5
        return json_str

    @staticmethod
    def extract_json(response_text: str) -> Optional[Dict[str, Any]]:
        """
        Extract a JSON object, handling markdown code blocks.
        """
        if not response_text:
            return None

        json_match = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', response_text)
        if json_match:
            json_str = json_match.group(1)
        else:
            json_match = re.search(r'\{[\s\S]*\}', response_text)
            if not json_match:
                return None
            json_str = json_match.group(0)

        for candidate in (json_str, ResponseParser.fix_json(json_str)):
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            return parsed if isinstance(parsed, dict) else None
        return None

    @staticmethod
    def extract_json_array(response_text: str) -> Optional[List[Any]]:
        """
        Extract a JSON array. A lone object is wrapped in a list; as a last
        resort each flat ``{...}`` is parsed on its own.
        """
        if not response_text:
            return None

        match = re.search(r'\[[\s\S]*\]', response_text)
        if match:
            json_str = match.group(0)
        else:
            obj_match = re.search(r'\{[\s\S]*\}', response_text)
            if not obj_match:
                return None
            json_str = f"[{obj_match.group(0)}]"

        for candidate in (json_str, ResponseParser.fix_json(json_str)):
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            return parsed if isinstance(parsed, list) else None

        objects = re.findall(r'\{[^{}]*\}', json_str)
        if not objects:
            return None
        items = []
        for obj in objects:
            try:
                items.append(json.loads(ResponseParser.fix_json(obj)))
            except json.JSONDecodeError:
                items.append(None)
        return items

    @staticmethod
    def extract_index_list(response_text: str) -> List[int]:
        """First ``[1, 2, 3]`` style integer list in the text."""
        if not response_text:
            return []
        match = re.search(r'\[[\d,\s]*\]', response_text)
        if not match:
            return []
        try:
            return [int(i) for i in json.loads(match.group(0))]
        except (json.JSONDecodeError, TypeError, ValueError):
            return []


# =============================================================================
# MAIN SERVICE CLASS
# =============================================================================

class GroqService:
    """
    LLM service backed by Groq.

    Each call walks an ordered list of models and returns the first
    non-empty completion; callers decide what to do when all fail.
    """

    def __init__(self):
        self.client: Optional[AsyncOpenAI] = None
        self.settings = get_settings()
        self._available = False

        self.usage = UsageTracker()
        self.parser = ResponseParser()

        # Cache configuration (TTL in seconds)
        self._cache: Dict[str, CachedResponse] = {}
        self._cache_ttl = {
            'hedge_analysis': 600,    # 10 minutes
        }

    def initialize(self, api_key: str = None) -> bool:
        """Initialize the Groq client."""
        key = api_key or self.settings.GROQ_API_KEY
        if not key:
            logger.warning("GROQ_API_KEY not configured")
            return False

        try:
            self.client = AsyncOpenAI(
                api_key=key,
                base_url=self.settings.GROQ_BASE_URL,
                timeout=self.settings.GROQ_TIMEOUT_SECONDS,
                max_retries=0,
            )
            self._available = True
            logger.info(
                f"Groq service initialized "
                f"(models: {', '.join(self.settings.GROQ_MODELS[:2])}, ...)"
            )
            return True
        except Exception as e:
            logger.error(f"Failed to initialize Groq client: {e}")
            return False

    def is_available(self) -> bool:
        """Check if Groq service is available."""
        return self._available and self.client is not None

    # -------------------------------------------------------------------------
    # CORE API METHODS
    # -------------------------------------------------------------------------

    async def _call_model(
        self,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[Optional[str], Optional[TokenUsage]]:
        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not response.choices:
            return None, None

        content = response.choices[0].message.content
        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
                model=model,
            )
        return content, usage

    async def complete(
        self,
        prompt: str,
        system_prompt: str = None,
        models: List[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1024,
    ) -> Tuple[Optional[str], Optional[TokenUsage]]:
        """
        Run a chat completion, falling back through ``models`` in order.

        Returns:
            Tuple of (response_text, token_usage), or (None, None) when the
            service is unavailable or every model failed.
        """
        if not self.is_available():
            logger.warning("Groq service not available")
            return None, None

        models = models or self.settings.GROQ_MODELS
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        for model in models:
            try:
                logger.debug(f"Trying model: {model}")
                content, usage = await self._call_model(model, messages, temperature, max_tokens)

            except openai.RateLimitError:
                logger.info(f"Model {model} rate limited, trying next...")
                self.usage.record_failure(model)
                continue

            except openai.APIStatusError as e:
                logger.warning(f"Groq API error for {model}: {e.status_code}")
                self.usage.record_failure(model)
                continue

            except openai.APIError as e:
                logger.warning(f"Groq request failed for {model}: {e}")
                self.usage.record_failure(model)
                continue

            if not content:
                logger.warning(f"No content from model {model}")
                self.usage.record_failure(model)
                continue

            self.usage.record_success(usage or TokenUsage(0, 0, model))
            logger.info(f"Success with model: {model}")
            return content, usage

        logger.error("All Groq models exhausted")
        return None, None

    def get_cached(self, cache_key: str, cache_type: str) -> Optional[Any]:
        """Get cached response if valid."""
        if cache_key in self._cache:
            cached = self._cache[cache_key]
            ttl = self._cache_ttl.get(cache_type, 900)
            if not cached.is_expired(ttl):
                logger.debug(f"Cache hit for {cache_key}")
                return cached.data
            del self._cache[cache_key]
        return None

    def set_cached(self, cache_key: str, data: Any):
        """Cache a response."""
        self._cache[cache_key] = CachedResponse(data=data, timestamp=datetime.now())

    def get_usage_stats(self) -> Dict[str, Any]:
        """Current day's per-model request counts."""
        return {
            'available': self.is_available(),
            'day': self.usage.day,
            'requests': dict(self.usage.requests),
            'failures': dict(self.usage.failures),
            'tokens': dict(self.usage.tokens),
        }


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_groq_service: Optional[GroqService] = None


def get_groq_service() -> GroqService:
    """Get the global Groq service instance, initializing it on first use."""
    global _groq_service
    if _groq_service is None:
        _groq_service = GroqService()
        _groq_service.initialize()
    return _groq_service


def initialize_groq_service(api_key: str = None) -> bool:
    """(Re)initialize the global Groq service."""
    service = get_groq_service()
    return service.initialize(api_key)
