"""Savings vault statistics protocol and Curve prices API implementation."""

from decimal import Decimal
from typing import Protocol

import requests

from lendwatch.core.exceptions import UpstreamFetchError
from lendwatch.core.timezone import parse_datetime_utc
from lendwatch.domain.models import SavingsInfo


class SavingsStatsSource(Protocol):
    """Protocol for vault-wide savings statistics."""

    def fetch(self) -> SavingsInfo:
        """Return current TVL and projected APR of the savings vault."""
        ...


class CurveSavingsStatsSource:
    """Savings statistics from the Curve prices API (`supply` is the TVL)."""

    def __init__(
        self,
        session: requests.Session,
        url: str,
        vault_url: str,
        timeout_seconds: float = 15.0,
    ):
        self._session = session
        self._url = url
        self._vault_url = vault_url
        self._timeout = timeout_seconds

    def fetch(self) -> SavingsInfo:
        """Fetch the latest savings statistics."""
        try:
            response = self._session.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            stats = response.json()
            last_updated = stats.get("last_updated")
            return SavingsInfo(
                tvl=Decimal(str(stats["supply"])),
                apr=Decimal(str(stats["proj_apr"])),
                url=self._vault_url,
                last_updated=parse_datetime_utc(last_updated) if last_updated else None,
                last_updated_block=stats.get("last_updated_block"),
            )
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            raise UpstreamFetchError("Savings statistics", str(exc)) from exc
