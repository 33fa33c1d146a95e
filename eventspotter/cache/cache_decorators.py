"""
Cache decorators for easy function result caching.
"""
import hashlib
import json
from functools import wraps
from typing import Callable, Any
from eventspotter.cache.redis_client import cache
from eventspotter.core.logging import logger

# Prefix shared by every facet key; event writes invalidate it
FACETS_PREFIX = "events:facets"


def cached(key_prefix: str, expire: int = 300):
    """
    Decorator to cache coroutine results with configurable TTL.

    Args:
        key_prefix: Prefix for the cache key
        expire: Expiration time in seconds (default: 300 = 5 minutes)

    Usage:
        @cached('events:facets:tags', expire=300)
        async def list_tags(db):
            return tags
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            args_key = _generate_key_from_args(args, kwargs)
            cache_key = f"{key_prefix}:{args_key}"

            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return cached_value

            logger.debug(f"Cache miss for key: {cache_key}")
            result = await func(*args, **kwargs)

            await cache.set(cache_key, result, expire)

            return result
        return wrapper
    return decorator


async def invalidate_facets() -> int:
    """Drop every cached facet list."""
    return await cache.delete_pattern(f"{FACETS_PREFIX}:*")


def _generate_key_from_args(args: tuple, kwargs: dict) -> str:
    """
    Generate a unique cache key from function arguments.

    SQLAlchemy session objects are skipped so that every request shares the
    same key.

    Returns:
        MD5 hash of the arguments
    """
    filtered_args = []
    for arg in args:
        arg_type = str(type(arg))
        if 'AsyncSession' not in arg_type and 'Session' not in arg_type:
            filtered_args.append(arg)

    key_data = {
        'args': [str(arg) for arg in filtered_args],
        'kwargs': {k: str(v) for k, v in kwargs.items()}
    }
    key_string = json.dumps(key_data, sort_keys=True)

    return hashlib.md5(key_string.encode()).hexdigest()
