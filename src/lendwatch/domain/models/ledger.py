"""Ledger event domain model."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from lendwatch.domain.models.enums import EventKind


@dataclass(frozen=True)
class LedgerEvent:
    """
    A single deposit or withdraw observed on a vault for one user.

    Immutable once observed. `ordinal` is the block number of the log and is
    the ordering key; amounts are in underlying asset units.
    """

    kind: EventKind
    amount: Decimal
    transaction_hash: str
    ordinal: int
    chain: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EventKind):
            object.__setattr__(self, "kind", EventKind(self.kind))
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

    def to_dict(self) -> dict[str, Any]:
        data = {
            "kind": self.kind.value,
            "amount": str(self.amount),
            "transaction_hash": self.transaction_hash,
            "ordinal": self.ordinal,
        }
        if self.chain is not None:
            data["chain"] = self.chain
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerEvent":
        return cls(
            kind=EventKind(data["kind"]),
            amount=Decimal(str(data["amount"])),
            transaction_hash=data["transaction_hash"],
            ordinal=int(data["ordinal"]),
            chain=data.get("chain"),
        )
