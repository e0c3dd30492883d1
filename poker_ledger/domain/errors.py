from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping


class DomainValidationError(ValueError):
    """Raised when a ledger rule is violated."""


class NotFoundError(DomainValidationError):
    """Raised when a game, participant or settlement does not exist."""


class ConflictError(DomainValidationError):
    """Raised when an operation is not allowed in the current state."""


class InvalidAmount(DomainValidationError):
    def __init__(self, message: str, *, participant_id: str | None = None, amount: Any = None) -> None:
        super().__init__(message)
        self.participant_id = participant_id
        self.amount = amount


class LedgerImbalance(DomainValidationError):
    def __init__(
        self,
        *,
        total_buyin: Decimal,
        total_cashout: Decimal,
        epsilon: Decimal,
    ) -> None:
        self.total_buyin = total_buyin
        self.total_cashout = total_cashout
        self.difference = total_buyin - total_cashout
        self.epsilon = epsilon
        super().__init__(
            f"buy-in {total_buyin} vs cash-out {total_cashout}: "
            f"difference {self.difference} exceeds tolerance {epsilon}"
        )


class ResidualMismatch(RuntimeError):
    """Settlements did not drive every net position to zero."""

    def __init__(self, residuals: Mapping[str, Decimal]) -> None:
        self.residuals = dict(residuals)
        listed = ", ".join(f"{pid}={amount}" for pid, amount in sorted(self.residuals.items()))
        super().__init__(f"settlements leave non-zero balances: {listed}")
