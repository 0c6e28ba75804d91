"""Pydantic schemas for savings vault statistics."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SavingsInfoResponse(BaseModel):
    """Savings vault TVL, projected APR and app link."""

    tvl: float
    apr: float
    url: str
    last_updated: Optional[datetime] = None
    last_updated_block: Optional[int] = None
