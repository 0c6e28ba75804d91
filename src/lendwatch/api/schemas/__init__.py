"""Pydantic schemas for API request/response."""

from lendwatch.api.schemas.position import (
    PositionRequest,
    LedgerEventResponse,
    PositionResponse,
    LendingResponse,
    SavingsResponse,
)
from lendwatch.api.schemas.savings import SavingsInfoResponse

__all__ = [
    "PositionRequest",
    "LedgerEventResponse",
    "PositionResponse",
    "LendingResponse",
    "SavingsResponse",
    "SavingsInfoResponse",
]
