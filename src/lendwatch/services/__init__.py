"""Service layer - reconciliation and caching orchestration."""

from lendwatch.services.cache_service import CacheService, is_stale
from lendwatch.services.reconciliation_service import ReconciliationService
from lendwatch.services.savings_info_service import SavingsInfoService

__all__ = [
    "CacheService",
    "is_stale",
    "ReconciliationService",
    "SavingsInfoService",
]
