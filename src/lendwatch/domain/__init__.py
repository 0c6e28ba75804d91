"""Domain layer - pure business models with no external dependencies."""

from lendwatch.domain.models import (
    EventKind,
    SupportedChain,
    CacheNamespace,
    LedgerEvent,
    VaultDescriptor,
    PositionSnapshot,
    CacheEntry,
    ProgressWatermark,
    SavingsInfo,
)

__all__ = [
    "EventKind",
    "SupportedChain",
    "CacheNamespace",
    "LedgerEvent",
    "VaultDescriptor",
    "PositionSnapshot",
    "CacheEntry",
    "ProgressWatermark",
    "SavingsInfo",
]
