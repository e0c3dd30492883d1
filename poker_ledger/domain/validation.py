from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from .errors import ResidualMismatch
from .ledger import DEFAULT_EPSILON, ZERO, NetPosition, net_results

if TYPE_CHECKING:
    from .settlement import Settlement


@dataclass(frozen=True)
class ValidationReport:
    ok: bool
    residuals: dict[str, Decimal] = field(default_factory=dict)


def apply_settlements(
    positions: Mapping[str, NetPosition | Decimal],
    settlements: Iterable[Settlement],
) -> dict[str, Decimal]:
    """Replay settlements against net positions and return what is left per participant."""
    balances = net_results(positions)
    for settlement in settlements:
        balances[settlement.payer_id] = balances.get(settlement.payer_id, ZERO) + settlement.amount
        balances[settlement.payee_id] = balances.get(settlement.payee_id, ZERO) - settlement.amount
    return balances


def validate_settlements(
    positions: Mapping[str, NetPosition | Decimal],
    settlements: Iterable[Settlement],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> ValidationReport:
    balances = apply_settlements(positions, settlements)
    residuals = {
        participant_id: balance
        for participant_id, balance in balances.items()
        if abs(balance) > epsilon
    }
    return ValidationReport(ok=not residuals, residuals=residuals)


def ensure_settlements_balance(
    positions: Mapping[str, NetPosition | Decimal],
    settlements: Iterable[Settlement],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> None:
    report = validate_settlements(positions, settlements, epsilon)
    if not report.ok:
        raise ResidualMismatch(report.residuals)
