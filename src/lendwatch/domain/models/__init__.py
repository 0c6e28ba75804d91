"""Domain models package."""

from lendwatch.domain.models.enums import EventKind, SupportedChain, CacheNamespace
from lendwatch.domain.models.ledger import LedgerEvent
from lendwatch.domain.models.vault import VaultDescriptor
from lendwatch.domain.models.position import PositionSnapshot
from lendwatch.domain.models.cache import CacheEntry, ProgressWatermark
from lendwatch.domain.models.savings import SavingsInfo

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
