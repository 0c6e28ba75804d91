"""Savings vault statistics with a shared, short-lived cache entry."""

import logging

from lendwatch.domain.models import CacheNamespace, SavingsInfo
from lendwatch.providers.savings_stats import SavingsStatsSource
from lendwatch.services.cache_service import CacheService, SAVINGS_INFOS_KEY

logger = logging.getLogger(__name__)


class SavingsInfoService:
    """
    Service for the savings vault TVL and APR.

    The entry is shared by every user and is cheap to rebuild, so its
    freshness window is shorter than the per-user positions'.
    """

    def __init__(self, cache: CacheService, stats_source: SavingsStatsSource):
        self._cache = cache
        self._stats_source = stats_source

    def get_info(self) -> SavingsInfo:
        """Return cached statistics, refreshing them once stale."""
        cached = self._cache.get_fresh(SAVINGS_INFOS_KEY, CacheNamespace.SAVINGS_INFOS)
        if cached is not None:
            return SavingsInfo.from_dict(cached.data)

        info = self._stats_source.fetch()
        logger.info("Refreshed savings statistics: tvl=%s apr=%s", info.tvl, info.apr)
        self._cache.set(SAVINGS_INFOS_KEY, info.to_dict())
        return info
