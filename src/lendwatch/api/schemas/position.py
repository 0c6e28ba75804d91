"""Pydantic schemas for position endpoints."""

from typing import Optional

from pydantic import BaseModel

from lendwatch.domain.models import LedgerEvent, PositionSnapshot


class PositionRequest(BaseModel):
    """Request body: whose positions, on which chain."""

    user: str
    chain: str


class LedgerEventResponse(BaseModel):
    """A deposit or withdraw, amounts in underlying asset units."""

    kind: str
    amount: float
    transaction_hash: str
    ordinal: int
    chain: Optional[str] = None

    @classmethod
    def from_domain(cls, event: LedgerEvent) -> "LedgerEventResponse":
        return cls(
            kind=event.kind.value,
            amount=float(event.amount),
            transaction_hash=event.transaction_hash,
            ordinal=event.ordinal,
            chain=event.chain,
        )


class PositionResponse(BaseModel):
    """A user's position in one vault; events most recent first."""

    vault: str
    redeem_value: float
    deposited: float
    earnings: float
    collateral_symbol: Optional[str] = None
    borrowed_symbol: Optional[str] = None
    chain: Optional[str] = None
    apr: Optional[float] = None
    events: list[LedgerEventResponse]

    @classmethod
    def from_domain(cls, snapshot: PositionSnapshot) -> "PositionResponse":
        return cls(
            vault=snapshot.vault,
            redeem_value=float(snapshot.redeem_value),
            deposited=float(snapshot.deposited),
            earnings=float(snapshot.earnings),
            collateral_symbol=snapshot.collateral_symbol,
            borrowed_symbol=snapshot.borrowed_symbol,
            chain=snapshot.chain,
            apr=float(snapshot.apr) if snapshot.apr is not None else None,
            events=[LedgerEventResponse.from_domain(e) for e in snapshot.events],
        )


class LendingResponse(BaseModel):
    """Positions in every active lending vault of a chain."""

    status: str
    data: list[PositionResponse]


class SavingsResponse(BaseModel):
    """Position in the savings vault; status is "empty" without any event."""

    status: str
    data: PositionResponse
