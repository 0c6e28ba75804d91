"""Valuation source protocol."""

from decimal import Decimal
from typing import Protocol

from lendwatch.domain.models import SupportedChain


class ValuationSource(Protocol):
    """Protocol for reading what a user's vault shares are redeemable for now."""

    def redeemable_value(self, chain: SupportedChain, vault: str, user: str) -> Decimal:
        """
        Return the underlying-asset value of the user's current share balance.

        Failures are raised as UpstreamFetchError.
        """
        ...
