"""Redis implementation of CacheStore."""

import json
from datetime import datetime
from typing import Any, Optional

import redis

from lendwatch.core.timezone import now_utc, to_epoch_ms, from_epoch_ms
from lendwatch.domain.models import CacheEntry


class RedisCacheStore:
    """
    Redis-backed cache store.

    Each entry is a JSON document `{"updateTimestamp": <epoch ms>, "data": ...}`
    stored without expiry; staleness is decided by readers, not by Redis.
    """

    def __init__(self, client: redis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        """Create a store connected to a redis:// URL."""
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        """Retrieve the entry stored under key, or None."""
        raw = self._client.get(key)
        if raw is None:
            return None
        document = json.loads(raw)
        return CacheEntry(
            update_timestamp=from_epoch_ms(document["updateTimestamp"]),
            data=document["data"],
        )

    def set(self, key: str, data: Any, update_timestamp: Optional[datetime] = None) -> None:
        """Overwrite the entry under key."""
        timestamp = update_timestamp or now_utc()
        self._client.set(
            key,
            json.dumps({"updateTimestamp": to_epoch_ms(timestamp), "data": data}),
        )
