from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable

from .errors import ConflictError, DomainValidationError, InvalidAmount

MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 50

MIN_TRANSACTION_AMOUNT = Decimal("0.01")
MAX_TRANSACTION_AMOUNT = Decimal("10000.00")
MAX_PARTICIPANT_TOTAL = Decimal("50000.00")
CURRENCY_QUANTUM = Decimal("0.01")


class GameStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    PAYPAL = "paypal"
    VENMO = "venmo"
    ZELLE = "zelle"


_TRANSITIONS: dict[GameStatus, frozenset[GameStatus]] = {
    GameStatus.SCHEDULED: frozenset({GameStatus.IN_PROGRESS, GameStatus.CANCELLED}),
    GameStatus.IN_PROGRESS: frozenset({GameStatus.COMPLETED, GameStatus.CANCELLED}),
    GameStatus.COMPLETED: frozenset(),
    GameStatus.CANCELLED: frozenset(),
}


def ensure_transition(current: GameStatus | str, target: GameStatus | str) -> GameStatus:
    current_status = GameStatus(current)
    target_status = GameStatus(target)
    if target_status not in _TRANSITIONS[current_status]:
        raise ConflictError(f"cannot move game from {current_status.value} to {target_status.value}")
    return target_status


def normalize_participant(participant_id: str) -> str:
    value = participant_id.strip()
    if not value:
        raise DomainValidationError("participant id must be non-empty")
    return value


def unique_preserve_order(participants: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for participant in participants:
        normalized = normalize_participant(participant)
        if normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def validate_roster(participants: Iterable[str]) -> list[str]:
    roster = list(participants)
    ordered = unique_preserve_order(roster)
    if len(ordered) != len(roster):
        raise DomainValidationError("participants must be unique")
    if len(ordered) < MIN_PARTICIPANTS:
        raise DomainValidationError(f"at least {MIN_PARTICIPANTS} participants required")
    if len(ordered) > MAX_PARTICIPANTS:
        raise DomainValidationError(f"at most {MAX_PARTICIPANTS} participants allowed")
    return ordered


def to_decimal(value: object) -> Decimal:
    """Convert ints, strings and floats to Decimal without binary-float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidAmount(f"amount must be numeric, got {value!r}", amount=value)
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmount(f"amount must be numeric, got {value!r}", amount=value) from exc


def to_money(value: object) -> Decimal:
    return to_decimal(value).quantize(CURRENCY_QUANTUM)


def validate_transaction_amount(amount: object, *, participant_id: str | None = None) -> Decimal:
    value = to_decimal(amount)
    if not value.is_finite():
        raise InvalidAmount(f"amount must be finite, got {value}", participant_id=participant_id, amount=value)
    if value < MIN_TRANSACTION_AMOUNT or value > MAX_TRANSACTION_AMOUNT:
        raise InvalidAmount(
            f"amount must be between {MIN_TRANSACTION_AMOUNT} and {MAX_TRANSACTION_AMOUNT}, got {value}",
            participant_id=participant_id,
            amount=value,
        )
    if value != value.quantize(CURRENCY_QUANTUM):
        raise InvalidAmount(
            f"amount must have at most two decimal places, got {value}",
            participant_id=participant_id,
            amount=value,
        )
    return value


def validate_participant_total(current: Decimal, amount: Decimal, *, participant_id: str | None = None) -> Decimal:
    """Running buy-in or cash-out total after ``amount``; capped per participant."""
    total = current + amount
    if total > MAX_PARTICIPANT_TOTAL:
        raise InvalidAmount(
            f"total for participant {participant_id} would be {total}, above {MAX_PARTICIPANT_TOTAL}",
            participant_id=participant_id,
            amount=amount,
        )
    return total
