"""
Redis caching service

Values are JSON-serialized. Any Redis failure is logged and treated as a
cache miss so upstream calls still go through.
"""
import json
import redis
from typing import Any, Optional
from hedgeboard.config import get_settings
from loguru import logger

settings = get_settings()

KEY_PREFIX = "hedgeboard"


def cache_key(*parts: Any) -> str:
    """Build a namespaced key, e.g. cache_key("markets", 50) -> 'hedgeboard:markets:50'."""
    return ":".join([KEY_PREFIX] + [str(p).lower() for p in parts])


class CacheService:
    """Redis cache service with automatic serialization"""

    def __init__(self):
        self._client: Optional[redis.Redis] = None

    @property
    def redis_client(self) -> redis.Redis:
        """Lazily connect so importing the app never touches Redis."""
        if self._client is None:
            if settings.REDIS_URL:
                self._client = redis.from_url(
                    settings.REDIS_URL,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=10,
                )
            else:
                self._client = redis.Redis(
                    host=settings.REDIS_HOST,
                    port=settings.REDIS_PORT,
                    db=settings.REDIS_DB,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=10,
                )
        return self._client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        try:
            value = self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL"""
        try:
            serialized = json.dumps(value, default=str)
            self.redis_client.setex(key, ttl, serialized)
            return True
        except Exception as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        try:
            self.redis_client.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Cache delete error for key {key}: {e}")
            return False

    def ping(self) -> bool:
        """Used by the health endpoint."""
        try:
            return bool(self.redis_client.ping())
        except Exception as e:
            logger.warning(f"Cache ping failed: {e}")
            return False


# Singleton instance
cache = CacheService()
