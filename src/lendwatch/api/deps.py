"""Dependency injection for FastAPI."""

from typing import Generator, Optional

import requests
from fastapi import Depends

from lendwatch.config.settings import Settings, get_settings
from lendwatch.repositories.protocols import CacheStore
from lendwatch.repositories.redis import RedisCacheStore
from lendwatch.repositories.sqlalchemy import SqlAlchemyCacheStore, get_session_factory
from lendwatch.providers import (
    CurveSavingsStatsSource,
    CurveVaultCatalog,
    EventSource,
    SavingsStatsSource,
    ValuationSource,
    VaultCatalog,
    Web3Clients,
    Web3EventSource,
    Web3ValuationSource,
)
from lendwatch.services import CacheService, ReconciliationService, SavingsInfoService

# Long-lived client handles, built on first use
_redis_store: Optional[RedisCacheStore] = None
_http_session: Optional[requests.Session] = None
_web3_clients: Optional[Web3Clients] = None


def is_redis_url(url: str) -> bool:
    """Return True if the cache URL points at a Redis server."""
    return url.startswith(("redis://", "rediss://", "unix://"))


def get_app_settings() -> Settings:
    """Provide the current Settings instance."""
    return get_settings()


def get_cache_store(
    settings: Settings = Depends(get_app_settings),
) -> Generator[CacheStore, None, None]:
    """Provide the configured CacheStore (raises ConfigurationError if unset)."""
    global _redis_store
    url = settings.get_cache_url()
    if is_redis_url(url):
        if _redis_store is None:
            _redis_store = RedisCacheStore.from_url(url)
        yield _redis_store
        return

    db = get_session_factory()()
    try:
        yield SqlAlchemyCacheStore(db)
    finally:
        db.close()


def get_cache_service(
    store: CacheStore = Depends(get_cache_store),
    settings: Settings = Depends(get_app_settings),
) -> CacheService:
    """Provide CacheService instance."""
    return CacheService(store=store, freshness_minutes=settings.freshness_minutes)


def get_http_session() -> requests.Session:
    """Provide the shared HTTP session for remote APIs."""
    global _http_session
    if _http_session is None:
        _http_session = requests.Session()
    return _http_session


def get_web3_clients(settings: Settings = Depends(get_app_settings)) -> Web3Clients:
    """Provide the shared per-chain Web3 clients."""
    global _web3_clients
    if _web3_clients is None:
        _web3_clients = Web3Clients(settings)
    return _web3_clients


def get_vault_catalog(
    session: requests.Session = Depends(get_http_session),
    settings: Settings = Depends(get_app_settings),
) -> VaultCatalog:
    """Provide VaultCatalog instance."""
    return CurveVaultCatalog(
        session=session,
        url_template=settings.vault_catalog_url,
        timeout_seconds=settings.http_timeout_seconds,
        excluded_collateral_symbols=settings.excluded_collateral_symbols,
    )


def get_event_source(
    clients: Web3Clients = Depends(get_web3_clients),
    settings: Settings = Depends(get_app_settings),
) -> EventSource:
    """Provide EventSource instance."""
    return Web3EventSource(clients=clients, max_block_range=settings.max_log_block_range)


def get_valuation_source(clients: Web3Clients = Depends(get_web3_clients)) -> ValuationSource:
    """Provide ValuationSource instance."""
    return Web3ValuationSource(clients=clients)


def get_savings_stats_source(
    session: requests.Session = Depends(get_http_session),
    settings: Settings = Depends(get_app_settings),
) -> SavingsStatsSource:
    """Provide SavingsStatsSource instance."""
    return CurveSavingsStatsSource(
        session=session,
        url=settings.savings_stats_url,
        vault_url=settings.savings_vault_url,
        timeout_seconds=settings.http_timeout_seconds,
    )


def get_reconciliation_service(
    cache: CacheService = Depends(get_cache_service),
    vault_catalog: VaultCatalog = Depends(get_vault_catalog),
    event_source: EventSource = Depends(get_event_source),
    valuation_source: ValuationSource = Depends(get_valuation_source),
    settings: Settings = Depends(get_app_settings),
) -> ReconciliationService:
    """Provide ReconciliationService instance."""
    return ReconciliationService(
        cache=cache,
        vault_catalog=vault_catalog,
        event_source=event_source,
        valuation_source=valuation_source,
        max_workers=settings.max_workers,
        incremental_resume=settings.incremental_resume,
    )


def get_savings_info_service(
    cache: CacheService = Depends(get_cache_service),
    stats_source: SavingsStatsSource = Depends(get_savings_stats_source),
) -> SavingsInfoService:
    """Provide SavingsInfoService instance."""
    return SavingsInfoService(cache=cache, stats_source=stats_source)


def reset_clients() -> None:
    """Drop cached client handles (after settings change)."""
    global _redis_store, _http_session, _web3_clients
    if _http_session is not None:
        _http_session.close()
    _redis_store = None
    _http_session = None
    _web3_clients = None
