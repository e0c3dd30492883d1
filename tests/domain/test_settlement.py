import random
from decimal import Decimal

import pytest

from poker_ledger.domain import (
    InvalidAmount,
    LedgerImbalance,
    NetPosition,
    Settlement,
    SettlementStatus,
    Transaction,
    TransactionType,
    apply_settlements,
    build_settlement_plan,
    compute_settlements,
    validate_settlements,
)


def D(value: str) -> Decimal:
    return Decimal(value)


def test_single_debtor_pays_two_equal_creditors_in_id_order():
    positions = {"P0": D("-100"), "P1": D("50"), "P2": D("50")}

    settlements = compute_settlements(positions)

    assert settlements == [
        Settlement(payer_id="P0", payee_id="P1", amount=D("50")),
        Settlement(payer_id="P0", payee_id="P2", amount=D("50")),
    ]


def test_largest_debtor_is_matched_first():
    positions = {"P0": D("-20"), "P1": D("50"), "P2": D("-30")}

    settlements = compute_settlements(positions)

    assert settlements == [
        Settlement(payer_id="P2", payee_id="P1", amount=D("30")),
        Settlement(payer_id="P0", payee_id="P1", amount=D("20")),
    ]


def test_single_participant_with_zero_net_needs_no_settlements():
    positions = {"P0": NetPosition("P0", total_buyin=D("100"), total_cashout=D("100"))}

    settlements = compute_settlements(positions)

    assert settlements == []
    assert validate_settlements(positions, settlements).ok


def test_everyone_even_needs_no_settlements():
    positions = {name: D("0") for name in ("a", "b", "c", "d")}

    assert compute_settlements(positions) == []


def test_two_participants_settle_with_one_payment():
    positions = {
        "alice": NetPosition("alice", total_buyin=D("40.00"), total_cashout=D("115.50")),
        "bob": NetPosition("bob", total_buyin=D("100.00"), total_cashout=D("24.50")),
    }

    settlements = compute_settlements(positions)

    assert settlements == [Settlement(payer_id="bob", payee_id="alice", amount=D("75.50"))]
    assert settlements[0].status is SettlementStatus.PENDING


def test_equal_debts_are_ordered_by_participant_id():
    positions = {"zed": D("-50"), "amy": D("-50"), "kim": D("100")}

    settlements = compute_settlements(positions)

    assert [s.payer_id for s in settlements] == ["amy", "zed"]


def test_unbalanced_positions_are_rejected():
    with pytest.raises(LedgerImbalance):
        compute_settlements({"a": D("-10"), "b": D("5")})


def test_rounding_residue_within_tolerance_is_left_unsettled():
    positions = {"a": D("-10.01"), "b": D("10.00")}

    settlements = compute_settlements(positions)

    assert settlements == [Settlement(payer_id="a", payee_id="b", amount=D("10.00"))]
    assert validate_settlements(positions, settlements).ok


def test_plan_from_transactions_zeroes_every_position():
    transactions = [
        Transaction("alice", TransactionType.BUYIN, D("100")),
        Transaction("bob", TransactionType.BUYIN, D("100")),
        Transaction("carol", TransactionType.BUYIN, D("50")),
        Transaction("bob", TransactionType.BUYIN, D("50")),
        Transaction("alice", TransactionType.CASHOUT, D("260")),
        Transaction("carol", TransactionType.CASHOUT, D("40")),
    ]

    plan = build_settlement_plan(transactions)

    assert list(plan.positions) == ["alice", "bob", "carol"]
    assert plan.settlements == [
        Settlement(payer_id="bob", payee_id="alice", amount=D("150")),
        Settlement(payer_id="carol", payee_id="alice", amount=D("10")),
    ]


def _random_balanced_positions(rng: random.Random, size: int) -> dict[str, Decimal]:
    cents = [rng.randint(-50_000, 50_000) for _ in range(size - 1)]
    cents.append(-sum(cents))
    return {f"p{idx:02d}": Decimal(value) / 100 for idx, value in enumerate(cents)}


@pytest.mark.parametrize("seed", range(25))
def test_random_ledgers_always_converge_to_zero(seed):
    rng = random.Random(seed)
    size = rng.randint(1, 50)
    positions = _random_balanced_positions(rng, size)

    settlements = compute_settlements(positions)

    assert len(settlements) <= max(size - 1, 0)
    assert all(s.amount > 0 and s.payer_id != s.payee_id for s in settlements)
    assert all(balance == 0 for balance in apply_settlements(positions, settlements).values())
    report = validate_settlements(positions, settlements)
    assert report.ok
    assert report.residuals == {}


def test_netting_is_deterministic():
    rng = random.Random(1234)
    positions = _random_balanced_positions(rng, 50)

    assert compute_settlements(positions) == compute_settlements(dict(reversed(list(positions.items()))))


@pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), float("inf")])
def test_non_finite_net_position_is_an_invalid_amount(value):
    with pytest.raises(InvalidAmount) as exc_info:
        compute_settlements({"a": value, "b": D("10")})

    assert exc_info.value.participant_id == "a"
