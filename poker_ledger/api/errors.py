from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from poker_ledger.domain import ConflictError, DomainValidationError, InvalidAmount, LedgerImbalance, NotFoundError


def api_error(
    *,
    code: str,
    message: str,
    details: Any | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "code": code,
            "message": message,
            "details": details,
        },
    )


def domain_error(exc: DomainValidationError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return api_error(code="not_found", message=str(exc), status_code=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, LedgerImbalance):
        return api_error(
            code="ledger_imbalance",
            message=str(exc),
            details={
                "total_buyin": str(exc.total_buyin),
                "total_cashout": str(exc.total_cashout),
                "difference": str(exc.difference),
            },
            status_code=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, ConflictError):
        return api_error(code="conflict", message=str(exc), status_code=status.HTTP_409_CONFLICT)
    if isinstance(exc, InvalidAmount):
        return api_error(
            code="invalid_amount",
            message=str(exc),
            details={"participant_id": exc.participant_id, "amount": str(exc.amount)},
        )
    return api_error(code="validation_error", message=str(exc))
