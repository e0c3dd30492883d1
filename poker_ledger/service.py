from __future__ import annotations

import logging
from decimal import Decimal

from poker_ledger.domain import (
    DEFAULT_EPSILON,
    ConflictError,
    DomainValidationError,
    GameStatus,
    LedgerImbalance,
    LedgerSummary,
    NetPosition,
    NotFoundError,
    PaymentMethod,
    ResidualMismatch,
    SettlementStatus,
    Transaction,
    TransactionType,
    build_settlement_plan,
    ensure_balanced,
    ensure_transition,
    ledger_totals,
    normalize_participant,
    summarize_ledger,
    validate_participant_total,
    validate_roster,
    validate_transaction_amount,
)
from poker_ledger.storage.repository import (
    CalculationLogRow,
    GameRow,
    LedgerRepository,
    SettlementRow,
    TransactionRow,
)

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(self, repo: LedgerRepository, epsilon: Decimal = DEFAULT_EPSILON) -> None:
        self.repo = repo
        self.epsilon = epsilon

    def _game_or_404(self, game_id: int) -> GameRow:
        game = self.repo.get_game(game_id)
        if game is None:
            raise NotFoundError(f"game {game_id} not found")
        return game

    def start_game(self, name: str, participants: list[str], currency: str = "USD") -> int:
        roster = validate_roster(participants)
        return self.repo.create_game(name.strip(), currency.upper(), roster)

    def get_game(self, game_id: int) -> GameRow:
        return self._game_or_404(game_id)

    def begin_game(self, game_id: int) -> GameRow:
        game = self._game_or_404(game_id)
        self.repo.set_status(game_id, ensure_transition(game.status, GameStatus.IN_PROGRESS))
        return self._game_or_404(game_id)

    def cancel_game(self, game_id: int) -> GameRow:
        game = self._game_or_404(game_id)
        self.repo.set_status(game_id, ensure_transition(game.status, GameStatus.CANCELLED))
        return self._game_or_404(game_id)

    def add_participant(self, game_id: int, participant_id: str) -> GameRow:
        game = self._game_or_404(game_id)
        if game.status in (GameStatus.COMPLETED, GameStatus.CANCELLED):
            raise ConflictError(f"cannot add participants to a {game.status.value} game")
        participant = normalize_participant(participant_id)
        if participant in game.participants:
            raise ConflictError(f"participant {participant} already in game")
        validate_roster([*game.participants, participant])
        self.repo.add_participant(game_id, participant)
        return self._game_or_404(game_id)

    def record_transaction(
        self,
        game_id: int,
        participant_id: str,
        transaction_type: TransactionType | str,
        amount: object,
    ) -> TransactionRow:
        game = self._game_or_404(game_id)
        if game.status is not GameStatus.IN_PROGRESS:
            raise ConflictError(f"transactions can only be recorded while a game is in progress, not {game.status.value}")

        participant = normalize_participant(participant_id)
        if participant not in game.participants:
            raise NotFoundError(f"participant {participant} is not in game {game_id}")
        try:
            kind = TransactionType(transaction_type)
        except ValueError as exc:
            raise DomainValidationError(f"unknown transaction type: {transaction_type!r}") from exc
        value = validate_transaction_amount(amount, participant_id=participant)
        position = self.repo.get_net_positions(game_id)[participant]
        current = position.total_buyin if kind is TransactionType.BUYIN else position.total_cashout
        validate_participant_total(current, value, participant_id=participant)

        return self.repo.record_transaction(game_id, participant, kind, value)

    def list_transactions(self, game_id: int) -> list[TransactionRow]:
        self._game_or_404(game_id)
        return self.repo.list_transactions(game_id)

    def get_net_positions(self, game_id: int) -> dict[str, NetPosition]:
        self._game_or_404(game_id)
        return self.repo.get_net_positions(game_id)

    def validate_game(self, game_id: int) -> LedgerSummary:
        game = self._game_or_404(game_id)
        if game.status not in (GameStatus.IN_PROGRESS, GameStatus.COMPLETED):
            raise ConflictError(f"cannot validate a {game.status.value} game")
        return summarize_ledger(self.repo.get_net_positions(game_id), self.epsilon)

    def complete_game(self, game_id: int) -> GameRow:
        game = self._game_or_404(game_id)
        target = ensure_transition(game.status, GameStatus.COMPLETED)
        try:
            ensure_balanced(self.repo.get_net_positions(game_id), self.epsilon)
        except LedgerImbalance as exc:
            logger.warning("game %s cannot be completed: %s", game_id, exc)
            raise
        self.repo.set_status(game_id, target)
        return self._game_or_404(game_id)

    def calculate_settlements(self, game_id: int) -> list[SettlementRow]:
        """Generate settlements for a completed game, or return the ones already stored."""
        game = self._game_or_404(game_id)
        if game.status is not GameStatus.COMPLETED:
            raise ConflictError(f"cannot calculate settlements for a {game.status.value} game")

        # a break-even game has a success entry but no settlements
        calculated = any(entry.status == "success" for entry in self.repo.list_calculation_log(game_id))
        existing = self.repo.list_settlements(game_id)
        if calculated or existing:
            return existing

        transactions = [
            Transaction(participant_id=row.participant_id, type=row.type, amount=row.amount)
            for row in self.repo.list_transactions(game_id)
        ]
        try:
            plan = build_settlement_plan(transactions, self.epsilon)
        except ResidualMismatch as exc:
            logger.error("settlement post-condition failed for game %s: %s", game_id, exc)
            self._log_failure(game_id, exc)
            raise
        except DomainValidationError as exc:
            logger.warning("settlement calculation rejected for game %s: %s", game_id, exc)
            self._log_failure(game_id, exc)
            raise

        total_buyin, total_cashout = ledger_totals(plan.positions)
        saved = self.repo.save_settlements(game_id, plan.settlements)
        self.repo.log_calculation(
            game_id,
            "success",
            total_buyin=total_buyin,
            total_cashout=total_cashout,
            settlements_created=len(saved),
        )
        logger.info("calculated %d settlements for game %s", len(saved), game_id)
        return saved

    def _log_failure(self, game_id: int, exc: Exception) -> None:
        self.repo.log_calculation(
            game_id,
            "failed",
            error_message=str(exc),
            total_buyin=getattr(exc, "total_buyin", None),
            total_cashout=getattr(exc, "total_cashout", None),
        )

    def get_settlements(self, game_id: int) -> list[SettlementRow]:
        self._game_or_404(game_id)
        return self.repo.list_settlements(game_id)

    def get_calculation_log(self, game_id: int) -> list[CalculationLogRow]:
        self._game_or_404(game_id)
        return self.repo.list_calculation_log(game_id)

    def mark_settlement_complete(
        self,
        settlement_id: int,
        payment_method: PaymentMethod | str = PaymentMethod.CASH,
    ) -> SettlementRow:
        settlement = self.repo.get_settlement(settlement_id)
        if settlement is None:
            raise NotFoundError(f"settlement {settlement_id} not found")
        if settlement.status is SettlementStatus.COMPLETED:
            raise ConflictError(f"settlement {settlement_id} is already completed")
        try:
            method = PaymentMethod(payment_method)
        except ValueError as exc:
            raise DomainValidationError(f"unknown payment method: {payment_method!r}") from exc
        logger.info("settlement %s completed via %s", settlement_id, method.value)
        return self.repo.complete_settlement(settlement_id, method.value)
