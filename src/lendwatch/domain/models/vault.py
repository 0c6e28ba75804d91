"""Vault descriptor domain model."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class VaultDescriptor:
    """
    Static metadata of a vault, as supplied by the vault catalog.

    Valid for one refresh cycle only.
    """

    address: str
    collateral_symbol: str
    borrowed_symbol: str
    chain: str
    apr: Decimal = field(default_factory=lambda: Decimal("0"))
    deposit_url: Optional[str] = None
    withdraw_url: Optional[str] = None
    total_borrowed: Optional[Decimal] = None
