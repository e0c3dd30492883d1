"""Greedy netting of a balanced game ledger into pairwise settlements."""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from .errors import LedgerImbalance
from .game import SettlementStatus
from .ledger import DEFAULT_EPSILON, ZERO, NetPosition, Transaction, compute_net_positions, net_results
from .validation import ensure_settlements_balance


@dataclass(frozen=True)
class Settlement:
    payer_id: str
    payee_id: str
    amount: Decimal
    status: SettlementStatus = SettlementStatus.PENDING


@dataclass(frozen=True)
class SettlementPlan:
    positions: dict[str, NetPosition]
    settlements: list[Settlement]


def compute_settlements(
    positions: Mapping[str, NetPosition | Decimal],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> list[Settlement]:
    """Match the largest debtor against the largest creditor until one side is empty.

    Equal magnitudes are broken by participant id ascending. This needs at most
    ``n - 1`` transfers but is not guaranteed to find the minimum count.
    """
    nets = net_results(positions)
    losses = -sum((net for net in nets.values() if net < 0), ZERO)
    gains = sum((net for net in nets.values() if net > 0), ZERO)
    if abs(losses - gains) > epsilon:
        raise LedgerImbalance(total_buyin=losses, total_cashout=gains, epsilon=epsilon)

    creditors: list[tuple[Decimal, str]] = []
    debtors: list[tuple[Decimal, str]] = []
    for participant_id, net in nets.items():
        if net > 0:
            creditors.append((-net, participant_id))
        elif net < 0:
            debtors.append((net, participant_id))
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    settlements: list[Settlement] = []
    while creditors and debtors:
        credit_key, payee_id = heapq.heappop(creditors)
        debt_key, payer_id = heapq.heappop(debtors)
        credit = -credit_key
        debt = -debt_key

        amount = min(credit, debt)
        settlements.append(Settlement(payer_id=payer_id, payee_id=payee_id, amount=amount))

        credit -= amount
        debt -= amount
        if credit > 0:
            heapq.heappush(creditors, (-credit, payee_id))
        if debt > 0:
            heapq.heappush(debtors, (-debt, payer_id))

    return settlements


def build_settlement_plan(
    transactions: Iterable[Transaction],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> SettlementPlan:
    """Aggregate, net and verify a game's transactions in one pass."""
    positions = compute_net_positions(transactions, epsilon)
    settlements = compute_settlements(positions, epsilon)
    ensure_settlements_balance(positions, settlements, epsilon)
    return SettlementPlan(positions=positions, settlements=settlements)
