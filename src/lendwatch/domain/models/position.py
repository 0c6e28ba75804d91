"""Position snapshot domain model."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Optional

from lendwatch.domain.models.ledger import LedgerEvent
from lendwatch.domain.models.vault import VaultDescriptor


@dataclass(frozen=True)
class PositionSnapshot:
    """
    Derived state of one user's position in one vault.

    IMPORTANT: Never patch; always recompute wholesale from events and valuation.
    Events are ordered most recent first.
    """

    vault: str
    redeem_value: Decimal = field(default_factory=lambda: Decimal("0"))
    deposited: Decimal = field(default_factory=lambda: Decimal("0"))
    earnings: Decimal = field(default_factory=lambda: Decimal("0"))
    events: tuple[LedgerEvent, ...] = ()

    # Vault display metadata, attached by the orchestrator
    collateral_symbol: Optional[str] = None
    borrowed_symbol: Optional[str] = None
    chain: Optional[str] = None
    apr: Optional[Decimal] = None

    @property
    def is_empty(self) -> bool:
        """Return True if the user never interacted with the vault."""
        return not self.events

    @property
    def last_ordinal(self) -> Optional[int]:
        """Highest event ordinal in this snapshot, or None without events."""
        if not self.events:
            return None
        return max(e.ordinal for e in self.events)

    def with_vault(self, vault: VaultDescriptor) -> "PositionSnapshot":
        """Return a copy carrying the display metadata of `vault`."""
        return replace(
            self,
            collateral_symbol=vault.collateral_symbol,
            borrowed_symbol=vault.borrowed_symbol,
            chain=vault.chain,
            apr=vault.apr,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "vault": self.vault,
            "redeem_value": str(self.redeem_value),
            "deposited": str(self.deposited),
            "earnings": str(self.earnings),
            "events": [e.to_dict() for e in self.events],
            "collateral_symbol": self.collateral_symbol,
            "borrowed_symbol": self.borrowed_symbol,
            "chain": self.chain,
            "apr": str(self.apr) if self.apr is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositionSnapshot":
        apr = data.get("apr")
        return cls(
            vault=data["vault"],
            redeem_value=Decimal(str(data["redeem_value"])),
            deposited=Decimal(str(data["deposited"])),
            earnings=Decimal(str(data["earnings"])),
            events=tuple(LedgerEvent.from_dict(e) for e in data.get("events", [])),
            collateral_symbol=data.get("collateral_symbol"),
            borrowed_symbol=data.get("borrowed_symbol"),
            chain=data.get("chain"),
            apr=Decimal(str(apr)) if apr is not None else None,
        )
