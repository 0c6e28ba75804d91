"""Cache store protocol for derived data."""

from datetime import datetime
from typing import Any, Optional, Protocol

from lendwatch.domain.models import CacheEntry


class CacheStore(Protocol):
    """
    Interface for a key -> timestamped-value store.

    Values are JSON-compatible. No locking is provided: concurrent writers to
    the same key race and the last write wins.
    """

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        """Retrieve the entry stored under key, or None."""
        ...

    def set(self, key: str, data: Any, update_timestamp: Optional[datetime] = None) -> None:
        """Overwrite the entry under key; timestamp defaults to now."""
        ...
