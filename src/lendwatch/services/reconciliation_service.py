"""Reconciliation of vault positions against cached snapshots.

For each (user, chain) request the service returns cached snapshots while
they are fresh; otherwise it lists the chain's vaults, reads events and
valuations for every vault in parallel, recomputes each snapshot, advances the
progress watermark and writes both back to the cache.

The snapshot set and its watermark live in one cache entry written in a single
`set`, so a refresh never pairs one cycle's histories with another cycle's
watermark. Every vault of a cycle is scanned up to the same chain head, read
once before the fan-out, which keeps the watermark at or below what each vault
has actually been scanned through.

Incremental resumption keeps the whole event history: a vault present in the
previous snapshot set is rescanned only from the earlier of the watermark and
its own last event, and the new events are merged into the history stored in
that snapshot before the position is recomputed. Vaults seen for the first
time are scanned from their deployment block.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from lendwatch.core.addresses import normalize_address
from lendwatch.domain.models import (
    CacheNamespace,
    LedgerEvent,
    PositionSnapshot,
    ProgressWatermark,
    SupportedChain,
    VaultDescriptor,
)
from lendwatch.domain.registry import vault_start_block
from lendwatch.providers.event_source import EventSource
from lendwatch.providers.valuation_source import ValuationSource
from lendwatch.providers.vault_catalog import VaultCatalog
from lendwatch.services import position_calculator
from lendwatch.services.cache_service import CacheService, lending_key, savings_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultScanPlan:
    """What to read for one vault in one reconciliation cycle."""

    vault: VaultDescriptor
    since_ordinal: int
    until_ordinal: Optional[int] = None
    prior_events: tuple[LedgerEvent, ...] = ()
    previous: Optional[PositionSnapshot] = None
    incremental: bool = False


class ReconciliationService:
    """
    Orchestrates cache lookup, parallel per-vault reads and snapshot
    computation for a user's vault positions.
    """

    def __init__(
        self,
        cache: CacheService,
        vault_catalog: VaultCatalog,
        event_source: EventSource,
        valuation_source: ValuationSource,
        max_workers: int = 8,
        incremental_resume: bool = True,
    ):
        self._cache = cache
        self._vault_catalog = vault_catalog
        self._event_source = event_source
        self._valuation_source = valuation_source
        self._max_workers = max_workers
        self._incremental_resume = incremental_resume

    @property
    def _resumable(self) -> bool:
        return self._incremental_resume and self._event_source.supports_resume

    def reconcile(self, user: str, chain: str) -> list[PositionSnapshot]:
        """
        Return the positions of `user` in every active vault of `chain`.

        Raises:
            InvalidAddressError: user is not an address (before any I/O)
            UnsupportedChainError: chain is not supported (before any I/O)
            UpstreamFetchError: any catalog, event or valuation read failed
        """
        user = normalize_address(user)
        chain_id = SupportedChain.parse(chain)

        key = lending_key(chain_id, user)

        cached = self._cache.get(key)
        if cached is not None and not self._cache.is_stale(cached, CacheNamespace.LENDING):
            logger.debug("Returning cached lending positions for %s on %s", user, chain_id.value)
            return [PositionSnapshot.from_dict(d) for d in cached.data["snapshots"]]

        watermark = None
        previous: dict[str, PositionSnapshot] = {}
        if cached is not None:
            if cached.data.get("watermark") is not None:
                watermark = ProgressWatermark.from_data(cached.data["watermark"])
            previous = self._index_previous(cached.data["snapshots"])

        vaults = self._vault_catalog.list_vaults(chain_id)
        head = None
        if vaults and self._resumable:
            head = self._event_source.latest_ordinal(chain_id)
        plans = [self._plan(chain_id, vault, previous, watermark, head) for vault in vaults]
        logger.info(
            "Refreshing lending positions for %s on %s: %d vaults (%d incremental)",
            user,
            chain_id.value,
            len(plans),
            sum(1 for p in plans if p.incremental),
        )

        snapshots = self._scan_all(chain_id, user, plans)

        # Only a cycle bounded by one head yields a watermark safe to resume from
        new_watermark = self._advance_watermark(watermark, snapshots) if head is not None else None
        self._cache.set(
            key,
            {
                "watermark": new_watermark.last_processed_ordinal if new_watermark else None,
                "snapshots": [s.to_dict() for s in snapshots],
            },
        )

        return snapshots

    def reconcile_vault(self, user: str, chain: str, vault: VaultDescriptor) -> PositionSnapshot:
        """
        Return the position of `user` in a single vault.

        The per-vault variant keeps no watermark: every refresh rescans the
        vault from its deployment block.
        """
        user = normalize_address(user)
        chain_id = SupportedChain.parse(chain)

        key = savings_key(chain_id, user, vault.address)
        cached = self._cache.get(key)
        if cached is not None and not self._cache.is_stale(cached, CacheNamespace.SAVINGS):
            logger.debug("Returning cached savings position for %s on %s", user, chain_id.value)
            return PositionSnapshot.from_dict(cached.data)

        previous = PositionSnapshot.from_dict(cached.data) if cached is not None else None
        logger.info("Refreshing savings position for %s in %s", user, vault.address)

        plan = VaultScanPlan(vault=vault, since_ordinal=vault_start_block(chain_id, vault.address))
        snapshot = self._scan_vault(chain_id, user, plan)
        self._report_anomalies(user, snapshot, previous)

        self._cache.set(key, snapshot.to_dict())
        return snapshot

    def _plan(
        self,
        chain: SupportedChain,
        vault: VaultDescriptor,
        previous: dict[str, PositionSnapshot],
        watermark: Optional[ProgressWatermark],
        head: Optional[int],
    ) -> VaultScanPlan:
        inception = vault_start_block(chain, vault.address)
        prior = previous.get(vault.address.lower())
        full_scan = VaultScanPlan(vault=vault, since_ordinal=inception, until_ordinal=head, previous=prior)

        if not self._resumable or watermark is None or prior is None:
            return full_scan

        resume_from = watermark.last_processed_ordinal
        last_ordinal = prior.last_ordinal
        if last_ordinal is not None:
            if last_ordinal > resume_from:
                logger.warning(
                    "Cached history of %s ends at block %d past watermark %d; rescanning from inception",
                    vault.address,
                    last_ordinal,
                    resume_from,
                )
                return full_scan
            # Never resume past the vault's own history, whatever the watermark says
            resume_from = last_ordinal

        # The resume block itself is rescanned; merge_events drops the overlap
        return VaultScanPlan(
            vault=vault,
            since_ordinal=max(inception, resume_from),
            until_ordinal=head,
            prior_events=prior.events,
            previous=prior,
            incremental=True,
        )

    def _scan_all(
        self,
        chain: SupportedChain,
        user: str,
        plans: list[VaultScanPlan],
    ) -> list[PositionSnapshot]:
        if not plans:
            return []

        workers = max(1, min(self._max_workers, len(plans)))
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = [ex.submit(self._scan_vault, chain, user, plan) for plan in plans]
            try:
                snapshots = [f.result() for f in futures]
            except Exception:
                # Any failed vault fails the whole reconciliation
                ex.shutdown(wait=False, cancel_futures=True)
                raise

        for plan, snapshot in zip(plans, snapshots):
            self._report_anomalies(user, snapshot, plan.previous)
        return snapshots

    def _scan_vault(
        self,
        chain: SupportedChain,
        user: str,
        plan: VaultScanPlan,
    ) -> PositionSnapshot:
        vault = plan.vault
        new_events = self._event_source.events_for(
            chain, vault.address, user, plan.since_ordinal, plan.until_ordinal
        )

        if not new_events and not plan.prior_events:
            return position_calculator.zero_snapshot(vault.address).with_vault(vault)

        redeem_value = self._valuation_source.redeemable_value(chain, vault.address, user)
        snapshot = position_calculator.compute(
            vault=vault.address,
            events=new_events,
            redeem_value=redeem_value,
            prior_events=plan.prior_events,
        )
        return snapshot.with_vault(vault)

    @staticmethod
    def _advance_watermark(
        watermark: Optional[ProgressWatermark],
        snapshots: list[PositionSnapshot],
    ) -> Optional[ProgressWatermark]:
        ordinals = [s.last_ordinal for s in snapshots if s.last_ordinal is not None]
        if watermark is not None:
            ordinals.append(watermark.last_processed_ordinal)
        if not ordinals:
            return None
        return ProgressWatermark(last_processed_ordinal=max(ordinals))

    @staticmethod
    def _index_previous(data: list[dict[str, Any]]) -> dict[str, PositionSnapshot]:
        snapshots = (PositionSnapshot.from_dict(d) for d in data)
        return {s.vault.lower(): s for s in snapshots}

    @staticmethod
    def _report_anomalies(
        user: str,
        snapshot: PositionSnapshot,
        previous: Optional[PositionSnapshot],
    ) -> None:
        if snapshot.deposited >= Decimal("0"):
            return
        if previous is not None and previous.deposited < Decimal("0"):
            logger.error(
                "Negative deposited persists for %s in vault %s: %s (previous cycle %s)",
                user,
                snapshot.vault,
                snapshot.deposited,
                previous.deposited,
            )
        else:
            logger.warning(
                "Negative deposited for %s in vault %s: %s",
                user,
                snapshot.vault,
                snapshot.deposited,
            )
