"""Savings vault endpoints."""

from fastapi import APIRouter, Depends, Query

from lendwatch.api.deps import get_reconciliation_service, get_savings_info_service
from lendwatch.api.schemas import PositionResponse, SavingsInfoResponse, SavingsResponse
from lendwatch.core.exceptions import UnsupportedChainError
from lendwatch.core.addresses import normalize_address
from lendwatch.domain.models import SupportedChain, VaultDescriptor
from lendwatch.domain.registry import SAVINGS_VAULT_ADDRESS, SAVINGS_VAULT_CHAIN
from lendwatch.services import ReconciliationService, SavingsInfoService

router = APIRouter(prefix="/savings", tags=["savings"])

SAVINGS_VAULT = VaultDescriptor(
    address=SAVINGS_VAULT_ADDRESS,
    collateral_symbol="crvUSD",
    borrowed_symbol="crvUSD",
    chain=SAVINGS_VAULT_CHAIN.value,
)


@router.get("", response_model=SavingsResponse)
def get_savings_position(
    user: str = Query(..., description="User address"),
    chain: str = Query(..., description="Chain identifier (ethereum)"),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> SavingsResponse:
    """
    Return the user's position in the savings vault.

    status is "empty" when the user never deposited.
    """
    normalize_address(user)
    if SupportedChain.parse(chain) != SAVINGS_VAULT_CHAIN:
        raise UnsupportedChainError(chain)

    snapshot = service.reconcile_vault(user=user, chain=chain, vault=SAVINGS_VAULT)
    return SavingsResponse(
        status="empty" if snapshot.is_empty else "success",
        data=PositionResponse.from_domain(snapshot),
    )


@router.get("/infos", response_model=SavingsInfoResponse)
def get_savings_infos(
    service: SavingsInfoService = Depends(get_savings_info_service),
) -> SavingsInfoResponse:
    """Return savings vault TVL and projected APR."""
    info = service.get_info()
    return SavingsInfoResponse(
        tvl=float(info.tvl),
        apr=float(info.apr),
        url=info.url,
        last_updated=info.last_updated,
        last_updated_block=info.last_updated_block,
    )
