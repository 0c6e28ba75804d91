"""Savings vault statistics model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class SavingsInfo:
    """Vault-wide statistics of the savings vault, shared across users."""

    tvl: Decimal
    apr: Decimal
    url: str
    last_updated: Optional[datetime] = None
    last_updated_block: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tvl": str(self.tvl),
            "apr": str(self.apr),
            "url": self.url,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "last_updated_block": self.last_updated_block,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavingsInfo":
        last_updated = data.get("last_updated")
        return cls(
            tvl=Decimal(str(data["tvl"])),
            apr=Decimal(str(data["apr"])),
            url=data["url"],
            last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
            last_updated_block=data.get("last_updated_block"),
        )
