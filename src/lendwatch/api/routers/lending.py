"""Lending vault positions endpoint."""

from fastapi import APIRouter, Depends

from lendwatch.api.deps import get_reconciliation_service
from lendwatch.api.schemas import LendingResponse, PositionRequest, PositionResponse
from lendwatch.services import ReconciliationService

router = APIRouter(prefix="/lending", tags=["lending"])


@router.post("", response_model=LendingResponse)
def get_lending_positions(
    request: PositionRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> LendingResponse:
    """
    Return the user's position in every active lending vault of the chain.

    Served from cache while fresh; otherwise every vault is rescanned in
    parallel before responding.
    """
    snapshots = service.reconcile(user=request.user, chain=request.chain)
    return LendingResponse(
        status="success",
        data=[PositionResponse.from_domain(s) for s in snapshots],
    )
