"""Aggregation of buy-in and cash-out transactions into per-participant net positions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .errors import DomainValidationError, InvalidAmount, LedgerImbalance
from .game import normalize_participant, to_decimal

DEFAULT_EPSILON = Decimal("0.01")
ZERO = Decimal("0")


class TransactionType(str, Enum):
    BUYIN = "buyin"
    CASHOUT = "cashout"


@dataclass(frozen=True)
class Transaction:
    participant_id: str
    type: TransactionType
    amount: Decimal


@dataclass(frozen=True)
class NetPosition:
    participant_id: str
    total_buyin: Decimal = ZERO
    total_cashout: Decimal = ZERO

    @property
    def net_result(self) -> Decimal:
        return self.total_cashout - self.total_buyin


@dataclass(frozen=True)
class LedgerSummary:
    is_valid: bool
    total_buyin: Decimal
    total_cashout: Decimal
    difference: Decimal
    message: str


def _transaction_type(value: TransactionType | str) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError as exc:
        raise DomainValidationError(f"unknown transaction type: {value!r}") from exc


def _checked_amount(transaction: Transaction) -> Decimal:
    amount = to_decimal(transaction.amount)
    if not amount.is_finite():
        raise InvalidAmount(
            f"non-finite amount {amount} for participant {transaction.participant_id}",
            participant_id=transaction.participant_id,
            amount=amount,
        )
    if amount < 0:
        raise InvalidAmount(
            f"negative amount {amount} for participant {transaction.participant_id}",
            participant_id=transaction.participant_id,
            amount=amount,
        )
    return amount


def compute_net_positions(
    transactions: Iterable[Transaction],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> dict[str, NetPosition]:
    """Sum buy-ins and cash-outs per participant for a single game.

    Participants appear in the order of their first transaction. Any invalid
    amount fails the whole aggregation, and so does a ledger whose total
    buy-in and total cash-out differ by more than ``epsilon``.
    """
    buyins: dict[str, Decimal] = {}
    cashouts: dict[str, Decimal] = {}

    for transaction in transactions:
        participant_id = normalize_participant(transaction.participant_id)
        kind = _transaction_type(transaction.type)
        amount = _checked_amount(transaction)

        buyins.setdefault(participant_id, ZERO)
        cashouts.setdefault(participant_id, ZERO)
        if kind is TransactionType.BUYIN:
            buyins[participant_id] += amount
        else:
            cashouts[participant_id] += amount

    positions = {
        participant_id: NetPosition(
            participant_id=participant_id,
            total_buyin=buyins[participant_id],
            total_cashout=cashouts[participant_id],
        )
        for participant_id in buyins
    }
    ensure_balanced(positions, epsilon)
    return positions


def net_results(positions: Mapping[str, NetPosition | Decimal]) -> dict[str, Decimal]:
    """Net result per participant; a bare Decimal is taken as the net result itself."""
    nets: dict[str, Decimal] = {}
    for participant_id, value in positions.items():
        net = value.net_result if isinstance(value, NetPosition) else to_decimal(value)
        if not net.is_finite():
            raise InvalidAmount(
                f"non-finite net result {net} for participant {participant_id}",
                participant_id=participant_id,
                amount=net,
            )
        nets[participant_id] = net
    return nets


def ledger_totals(positions: Mapping[str, NetPosition]) -> tuple[Decimal, Decimal]:
    total_buyin = sum((position.total_buyin for position in positions.values()), ZERO)
    total_cashout = sum((position.total_cashout for position in positions.values()), ZERO)
    return total_buyin, total_cashout


def ensure_balanced(positions: Mapping[str, NetPosition], epsilon: Decimal = DEFAULT_EPSILON) -> None:
    total_buyin, total_cashout = ledger_totals(positions)
    if abs(total_buyin - total_cashout) > epsilon:
        raise LedgerImbalance(total_buyin=total_buyin, total_cashout=total_cashout, epsilon=epsilon)


def summarize_ledger(positions: Mapping[str, NetPosition], epsilon: Decimal = DEFAULT_EPSILON) -> LedgerSummary:
    total_buyin, total_cashout = ledger_totals(positions)
    difference = total_buyin - total_cashout
    is_valid = abs(difference) <= epsilon
    if is_valid:
        message = "Buy-ins and cash-outs match"
    else:
        message = (
            f"Buy-ins ({total_buyin}) do not match cash-outs ({total_cashout}). "
            f"Difference: {abs(difference)}"
        )
    return LedgerSummary(
        is_valid=is_valid,
        total_buyin=total_buyin,
        total_cashout=total_cashout,
        difference=difference,
        message=message,
    )
