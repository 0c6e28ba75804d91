"""Repository layer - cache store abstractions and implementations."""

from lendwatch.repositories.protocols import CacheStore

__all__ = [
    "CacheStore",
]
