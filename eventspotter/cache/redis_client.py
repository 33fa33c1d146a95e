"""
Redis cache client with connection pooling and JSON serialization.
"""
import json
from typing import Optional, Any
import redis
from redis.connection import ConnectionPool
from eventspotter.core.config import settings
from eventspotter.core.logging import logger


class RedisCache:
    """Redis cache client with connection pooling.

    Every operation degrades to a cache miss when caching is disabled or
    Redis is unreachable; callers never see a Redis error.
    """

    def __init__(self, url: Optional[str] = None, enabled: Optional[bool] = None):
        self._url = url or settings.REDIS_URL
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        """Get or create Redis client with connection pooling."""
        if self._client is None:
            self._pool = redis.ConnectionPool.from_url(
                self._url,
                decode_responses=True,
                max_connections=20
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info("Redis connection pool created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value for ``key`` or None on a miss."""
        if not self.enabled:
            return None
        try:
            value = self._get_client().get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """
        Set value in cache with expiration.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            expire: Expiration time in seconds (default: 300)

        Returns:
            True if successful, False otherwise
        """
        if not self.enabled:
            return False
        try:
            serialized = json.dumps(value, default=str)
            self._get_client().setex(key, expire, serialized)
            return True
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching pattern.

        Args:
            pattern: Key pattern (e.g., 'events:facets:*')

        Returns:
            Number of keys deleted
        """
        if not self.enabled:
            return 0
        try:
            client = self._get_client()
            keys = client.keys(pattern)
            if keys:
                return client.delete(*keys)
            return 0
        except Exception as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0

    async def exists(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            return self._get_client().exists(key) > 0
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    def close(self):
        """Close Redis connection pool."""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("Redis connection pool closed")


# Create a single instance to be imported throughout the app
cache = RedisCache()
