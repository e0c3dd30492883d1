from __future__ import annotations

from fastapi import APIRouter, Depends

from poker_ledger.api.schemas import CompleteSettlementRequest, SettlementResponse
from poker_ledger.domain import PaymentMethod
from poker_ledger.runtime import get_service
from poker_ledger.service import LedgerService

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post(
    "/{settlement_id}/complete",
    response_model=SettlementResponse,
    summary="Confirm that a settlement was paid",
)
def complete_settlement(
    settlement_id: int,
    payload: CompleteSettlementRequest | None = None,
    service: LedgerService = Depends(get_service),
) -> SettlementResponse:
    method = payload.payment_method if payload is not None else PaymentMethod.CASH
    return SettlementResponse.model_validate(service.mark_settlement_complete(settlement_id, method))
