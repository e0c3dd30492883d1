from decimal import Decimal

import pytest

from poker_ledger.domain import (
    ConflictError,
    DomainValidationError,
    GameStatus,
    InvalidAmount,
    ensure_transition,
    unique_preserve_order,
    validate_roster,
    validate_transaction_amount,
)


def test_roster_requires_two_unique_participants() -> None:
    assert validate_roster([" alice ", "bob"]) == ["alice", "bob"]

    with pytest.raises(DomainValidationError):
        validate_roster(["alice"])

    with pytest.raises(DomainValidationError):
        validate_roster(["alice", "alice "])

    with pytest.raises(DomainValidationError):
        validate_roster([f"p{idx}" for idx in range(51)])


def test_blank_participant_rejected() -> None:
    with pytest.raises(DomainValidationError):
        unique_preserve_order(["alice", "   "])


def test_lifecycle_transitions() -> None:
    assert ensure_transition(GameStatus.SCHEDULED, GameStatus.IN_PROGRESS) is GameStatus.IN_PROGRESS
    assert ensure_transition("in_progress", "completed") is GameStatus.COMPLETED
    assert ensure_transition(GameStatus.IN_PROGRESS, GameStatus.CANCELLED) is GameStatus.CANCELLED

    with pytest.raises(ConflictError):
        ensure_transition(GameStatus.SCHEDULED, GameStatus.COMPLETED)

    with pytest.raises(ConflictError):
        ensure_transition(GameStatus.COMPLETED, GameStatus.IN_PROGRESS)


@pytest.mark.parametrize("amount", ["0.01", "250", "10000.00", 12.5])
def test_transaction_amount_within_limits(amount) -> None:
    assert validate_transaction_amount(amount) == Decimal(str(amount))


@pytest.mark.parametrize("amount", ["0", "-1", "10000.01", "1.005", "NaN", "abc", True])
def test_transaction_amount_outside_limits(amount) -> None:
    with pytest.raises(InvalidAmount):
        validate_transaction_amount(amount, participant_id="alice")
