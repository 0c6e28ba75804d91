"""Timestamped cache with per-namespace freshness windows."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from lendwatch.core.exceptions import ConfigurationError
from lendwatch.core.timezone import now_utc, to_utc
from lendwatch.domain.models import CacheEntry, CacheNamespace, SupportedChain
from lendwatch.repositories.protocols import CacheStore

logger = logging.getLogger(__name__)

SAVINGS_INFOS_KEY = "savings-infos"


def lending_key(chain: SupportedChain, user: str) -> str:
    """Key of the lending snapshot set and progress watermark of a user."""
    return f"{CacheNamespace.LENDING.value}-{chain.value}-{user}"


def savings_key(chain: SupportedChain, user: str, vault: str) -> str:
    """Key of a user's single-vault savings snapshot."""
    return f"{CacheNamespace.SAVINGS.value}-{chain.value}-{user}-{vault}"


def is_stale(update_timestamp: datetime, window_minutes: float, now: datetime) -> bool:
    """
    Return True if an entry written at update_timestamp is older than the window.

    The distance is absolute: a timestamp in the future (clock skew) still
    becomes stale once it is more than the window away from now.
    """
    elapsed_minutes = abs((to_utc(now) - to_utc(update_timestamp)).total_seconds()) / 60
    return elapsed_minutes > window_minutes


class CacheService:
    """
    Cache store wrapper that stamps writes with the current time and answers
    freshness questions from a `{namespace -> minutes}` table.
    """

    def __init__(
        self,
        store: CacheStore,
        freshness_minutes: dict[str, int],
        clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._freshness_minutes = dict(freshness_minutes)
        self._clock = clock

    def now(self) -> datetime:
        """Current time according to the service clock."""
        return self._clock()

    def window(self, namespace: CacheNamespace) -> int:
        """Freshness window of a namespace, in minutes."""
        try:
            return self._freshness_minutes[namespace.value]
        except KeyError:
            raise ConfigurationError(f"Freshness window for namespace '{namespace.value}'")

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        """Return the entry under key, fresh or not."""
        return self._store.get(key)

    def set(self, key: str, data: Any) -> None:
        """Overwrite the entry under key, stamped with the current time."""
        self._store.set(key, data, self._clock())

    def is_stale(self, entry: CacheEntry[Any], namespace: CacheNamespace) -> bool:
        """Return True if entry must be recomputed."""
        return is_stale(entry.update_timestamp, self.window(namespace), self._clock())

    def get_fresh(self, key: str, namespace: CacheNamespace) -> Optional[CacheEntry[Any]]:
        """Return the entry under key if it is within its freshness window."""
        entry = self._store.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        if self.is_stale(entry, namespace):
            logger.debug("Cache stale: %s (written %s)", key, entry.update_timestamp.isoformat())
            return None
        logger.debug("Cache hit: %s", key)
        return entry
