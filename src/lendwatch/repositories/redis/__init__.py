"""Redis repository implementations."""

from lendwatch.repositories.redis.cache_store import RedisCacheStore

__all__ = [
    "RedisCacheStore",
]
