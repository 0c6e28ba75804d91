"""
Pytest configuration and fixtures for vault reconciliation tests.

This module provides:
- In-memory SQLite cache store fixtures
- A controllable clock for freshness checks
- Deterministic fake vault catalog, event, valuation and savings sources
- Factory helpers for ledger events and vault descriptors
- Service fixtures and an API test client with overridden dependencies
"""

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from web3 import Web3

from lendwatch.main import app
from lendwatch.api import deps
from lendwatch.config.settings import Settings, default_freshness_minutes, reset_settings
from lendwatch.core.exceptions import UpstreamFetchError
from lendwatch.core.timezone import UTC
from lendwatch.domain.models import (
    EventKind,
    LedgerEvent,
    SavingsInfo,
    SupportedChain,
    VaultDescriptor,
)
from lendwatch.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from lendwatch.repositories.sqlalchemy import orm_models  # noqa: F401
from lendwatch.repositories.sqlalchemy import SqlAlchemyCacheStore
from lendwatch.services import CacheService, ReconciliationService, SavingsInfoService


# =============================================================================
# ADDRESSES
# =============================================================================

USER = "0x" + "ab" * 20

# Registered lending vaults on ethereum (deployment blocks 19422666 / 19422678)
VAULT_A = Web3.to_checksum_address("0x8cf1de26729cfb7137af1a6b2a665e099ec319b5")
VAULT_A_START = 19422666
VAULT_B = Web3.to_checksum_address("0x5ae28c9197a4a6570216fc7e53e7e0221d7a0fef")
VAULT_B_START = 19422678

# Not in the deployment block table
UNKNOWN_VAULT = Web3.to_checksum_address("0x" + "cd" * 20)


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Clock returning a fixed instant until advanced."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now = self.now + timedelta(minutes=minutes)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    """Provide a controllable clock starting at fixed_now."""
    return FakeClock(fixed_now)


# =============================================================================
# EVENT / VAULT FACTORIES
# =============================================================================


def _tx_hash(kind: EventKind, ordinal: int) -> str:
    suffix = "01" if kind == EventKind.DEPOSIT else "02"
    return "0x" + f"{ordinal:062x}" + suffix


def deposit(amount, ordinal: int, transaction_hash: Optional[str] = None) -> LedgerEvent:
    """Create a deposit event."""
    return LedgerEvent(
        kind=EventKind.DEPOSIT,
        amount=Decimal(str(amount)),
        transaction_hash=transaction_hash or _tx_hash(EventKind.DEPOSIT, ordinal),
        ordinal=ordinal,
        chain="ethereum",
    )


def withdraw(amount, ordinal: int, transaction_hash: Optional[str] = None) -> LedgerEvent:
    """Create a withdraw event."""
    return LedgerEvent(
        kind=EventKind.WITHDRAW,
        amount=Decimal(str(amount)),
        transaction_hash=transaction_hash or _tx_hash(EventKind.WITHDRAW, ordinal),
        ordinal=ordinal,
        chain="ethereum",
    )


def vault_descriptor(
    address: str,
    apr: str = "5.25",
    collateral_symbol: str = "WETH",
    chain: str = "ethereum",
) -> VaultDescriptor:
    """Create a catalog entry for a vault."""
    return VaultDescriptor(
        address=address,
        collateral_symbol=collateral_symbol,
        borrowed_symbol="crvUSD",
        chain=chain,
        apr=Decimal(apr),
    )


# =============================================================================
# FAKE SOURCES
# =============================================================================


class RecordingEventSource:
    """
    Event source serving fixed per-vault events.

    Honors `since_ordinal` and `until_ordinal` (both inclusive) and records
    every call. `head` is the block returned as the chain head.
    """

    supports_resume = True

    def __init__(
        self,
        events_by_vault: Optional[dict[str, Iterable[LedgerEvent]]] = None,
        head: int = 20000000,
    ):
        self._events: dict[str, list[LedgerEvent]] = {}
        self._lock = threading.Lock()
        self.head = head
        self.calls: list[tuple[SupportedChain, str, str, Optional[int], Optional[int]]] = []
        for vault, events in (events_by_vault or {}).items():
            self.add(vault, *events)

    def add(self, vault: str, *events: LedgerEvent) -> None:
        self._events.setdefault(vault.lower(), []).extend(events)

    def latest_ordinal(self, chain: SupportedChain) -> int:
        return self.head

    def events_for(
        self,
        chain: SupportedChain,
        vault: str,
        user: str,
        since_ordinal: Optional[int] = None,
        until_ordinal: Optional[int] = None,
    ) -> list[LedgerEvent]:
        with self._lock:
            self.calls.append((chain, vault.lower(), user, since_ordinal, until_ordinal))
        events = self._events.get(vault.lower(), [])
        return [
            e
            for e in events
            if (since_ordinal is None or e.ordinal >= since_ordinal)
            and (until_ordinal is None or e.ordinal <= until_ordinal)
        ]

    def since_for(self, vault: str) -> list[Optional[int]]:
        """Return the since_ordinal of every call made for a vault."""
        return [since for _, v, _, since, _ in self.calls if v == vault.lower()]

    def until_for(self, vault: str) -> list[Optional[int]]:
        """Return the until_ordinal of every call made for a vault."""
        return [until for _, v, _, _, until in self.calls if v == vault.lower()]


class FailingEventSource:
    """Event source that always fails, optionally only for one vault."""

    supports_resume = True

    def __init__(self, only_vault: Optional[str] = None):
        self._only_vault = only_vault.lower() if only_vault else None

    def latest_ordinal(self, chain) -> int:
        return 20000000

    def events_for(self, chain, vault, user, since_ordinal=None, until_ordinal=None) -> list[LedgerEvent]:
        if self._only_vault is None or vault.lower() == self._only_vault:
            raise UpstreamFetchError("Event source", "RPC unavailable")
        return []


class FixedValuationSource:
    """Valuation source returning fixed per-vault values (default zero)."""

    def __init__(self, values: Optional[dict[str, Decimal]] = None):
        self.values = {k.lower(): Decimal(str(v)) for k, v in (values or {}).items()}
        self._lock = threading.Lock()
        self.calls: list[tuple[SupportedChain, str, str]] = []

    def redeemable_value(self, chain: SupportedChain, vault: str, user: str) -> Decimal:
        with self._lock:
            self.calls.append((chain, vault.lower(), user))
        return self.values.get(vault.lower(), Decimal("0"))


class FailingValuationSource:
    """Valuation source that always fails."""

    def redeemable_value(self, chain, vault, user) -> Decimal:
        raise UpstreamFetchError("Valuation source", "execution reverted")


class StaticVaultCatalog:
    """Vault catalog returning a fixed vault list for every chain."""

    def __init__(self, vaults: Iterable[VaultDescriptor] = ()):
        self.vaults = list(vaults)
        self.calls = 0

    def list_vaults(self, chain: SupportedChain) -> list[VaultDescriptor]:
        self.calls += 1
        return list(self.vaults)


class FailingVaultCatalog:
    """Vault catalog that always fails."""

    def list_vaults(self, chain: SupportedChain) -> list[VaultDescriptor]:
        raise UpstreamFetchError("Vault catalog", "503 Service Unavailable")


class StaticSavingsStatsSource:
    """Savings statistics source returning a fixed SavingsInfo."""

    def __init__(self, info: SavingsInfo):
        self.info = info
        self.calls = 0

    def fetch(self) -> SavingsInfo:
        self.calls += 1
        return self.info


class FailingSavingsStatsSource:
    """Savings statistics source that always fails."""

    def fetch(self) -> SavingsInfo:
        raise UpstreamFetchError("Savings statistics", "timeout")


@pytest.fixture
def event_source() -> RecordingEventSource:
    """Provide an empty recording event source."""
    return RecordingEventSource()


@pytest.fixture
def valuation_source() -> FixedValuationSource:
    """Provide a valuation source returning zero everywhere."""
    return FixedValuationSource()


@pytest.fixture
def vault_catalog() -> StaticVaultCatalog:
    """Provide a catalog with two active ethereum vaults."""
    return StaticVaultCatalog([vault_descriptor(VAULT_A), vault_descriptor(VAULT_B, collateral_symbol="wstETH")])


@pytest.fixture
def savings_info(fixed_now) -> SavingsInfo:
    """Sample savings vault statistics."""
    return SavingsInfo(
        tvl=Decimal("45000000.5"),
        apr=Decimal("12.34"),
        url="https://crvusd.curve.fi/#/ethereum/scrvUSD",
        last_updated=fixed_now,
        last_updated_block=20123456,
    )


@pytest.fixture
def savings_stats_source(savings_info) -> StaticSavingsStatsSource:
    """Provide a fixed savings statistics source."""
    return StaticSavingsStatsSource(savings_info)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache_store(test_session) -> SqlAlchemyCacheStore:
    """Provide test CacheStore."""
    return SqlAlchemyCacheStore(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def cache_service(cache_store, clock) -> CacheService:
    """Provide test CacheService driven by the fake clock."""
    return CacheService(
        store=cache_store,
        freshness_minutes=default_freshness_minutes(),
        clock=clock,
    )


@pytest.fixture
def reconciliation_service(
    cache_service,
    vault_catalog,
    event_source,
    valuation_source,
) -> ReconciliationService:
    """Provide test ReconciliationService."""
    return ReconciliationService(
        cache=cache_service,
        vault_catalog=vault_catalog,
        event_source=event_source,
        valuation_source=valuation_source,
        max_workers=4,
    )


@pytest.fixture
def savings_info_service(cache_service, savings_stats_source) -> SavingsInfoService:
    """Provide test SavingsInfoService."""
    return SavingsInfoService(cache=cache_service, stats_source=savings_stats_source)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a cache configured and no .env file."""
    return Settings(_env_file=None, cache_url="sqlite://")


@pytest.fixture
def client(
    test_settings,
    cache_service,
    vault_catalog,
    event_source,
    valuation_source,
    savings_stats_source,
) -> TestClient:
    """Provide FastAPI test client backed by the test cache and fake sources."""
    app.dependency_overrides[deps.get_app_settings] = lambda: test_settings
    app.dependency_overrides[deps.get_cache_service] = lambda: cache_service
    app.dependency_overrides[deps.get_vault_catalog] = lambda: vault_catalog
    app.dependency_overrides[deps.get_event_source] = lambda: event_source
    app.dependency_overrides[deps.get_valuation_source] = lambda: valuation_source
    app.dependency_overrides[deps.get_savings_stats_source] = lambda: savings_stats_source
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    deps.reset_clients()
