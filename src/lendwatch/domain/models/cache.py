"""Cache models for derived position state."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """
    A cached value and the instant it was computed.

    Overwritten wholesale on every refresh; no partial merge, no versioning.
    """

    update_timestamp: datetime
    data: T


@dataclass(frozen=True)
class ProgressWatermark:
    """Last event ordinal processed for a (user, chain) pair."""

    last_processed_ordinal: int

    @classmethod
    def from_data(cls, data: Any) -> "ProgressWatermark":
        # Either the bare block number or a {"last_processed_ordinal": N} document
        if isinstance(data, dict):
            return cls(last_processed_ordinal=int(data["last_processed_ordinal"]))
        return cls(last_processed_ordinal=int(data))
