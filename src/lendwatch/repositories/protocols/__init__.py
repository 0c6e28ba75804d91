"""Repository protocol definitions (interfaces)."""

from lendwatch.repositories.protocols.cache_store import CacheStore

__all__ = [
    "CacheStore",
]
