"""Vault catalog protocol and Curve lending API implementation."""

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional, Protocol

import requests

from lendwatch.core.addresses import normalize_address
from lendwatch.core.exceptions import InvalidAddressError, UpstreamFetchError
from lendwatch.domain.models import SupportedChain, VaultDescriptor

logger = logging.getLogger(__name__)


class VaultCatalog(Protocol):
    """Protocol for listing the active vaults of a chain."""

    def list_vaults(self, chain: SupportedChain) -> list[VaultDescriptor]:
        """Return vaults with a positive lending yield on `chain`."""
        ...


class CurveVaultCatalog:
    """
    Vault catalog backed by the Curve lending vaults API.

    Keeps vaults whose lend APY is positive and drops vaults whose collateral
    symbol is in `excluded_collateral_symbols`.
    """

    def __init__(
        self,
        session: requests.Session,
        url_template: str,
        timeout_seconds: float = 15.0,
        excluded_collateral_symbols: Optional[Iterable[str]] = None,
    ):
        self._session = session
        self._url_template = url_template
        self._timeout = timeout_seconds
        self._excluded = {s.upper() for s in (excluded_collateral_symbols or [])}

    def list_vaults(self, chain: SupportedChain) -> list[VaultDescriptor]:
        """Fetch and filter the lending vaults of a chain."""
        url = self._url_template.format(chain=chain.value)
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
            raw_vaults = payload["data"]["lendingVaultData"]
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            raise UpstreamFetchError("Vault catalog", str(exc)) from exc

        vaults = []
        for raw in raw_vaults:
            vault = self._to_descriptor(raw, chain)
            if vault.apr <= 0:
                continue
            if vault.collateral_symbol.upper() in self._excluded:
                continue
            vaults.append(vault)

        logger.debug("Catalog returned %d/%d active vaults on %s", len(vaults), len(raw_vaults), chain.value)
        return vaults

    @staticmethod
    def _to_descriptor(raw: dict[str, Any], chain: SupportedChain) -> VaultDescriptor:
        try:
            urls = raw.get("lendingVaultUrls") or {}
            borrowed_total = (raw.get("borrowed") or {}).get("total")
            return VaultDescriptor(
                address=normalize_address(raw["address"]),
                collateral_symbol=raw["assets"]["collateral"]["symbol"],
                borrowed_symbol=raw["assets"]["borrowed"]["symbol"],
                chain=raw.get("blockchainId") or chain.value,
                apr=Decimal(str(raw["rates"]["lendApyPcent"])),
                deposit_url=urls.get("deposit"),
                withdraw_url=urls.get("withdraw"),
                total_borrowed=Decimal(str(borrowed_total)) if borrowed_total is not None else None,
            )
        except (KeyError, TypeError, InvalidAddressError) as exc:
            raise UpstreamFetchError("Vault catalog", f"malformed vault entry: {exc}") from exc
