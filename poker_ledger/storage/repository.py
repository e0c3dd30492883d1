from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from poker_ledger.domain import GameStatus, NetPosition, Settlement, SettlementStatus, TransactionType, to_money
from poker_ledger.storage.models import (
    Game,
    GameParticipant,
    LedgerTransaction,
    Settlement as SettlementModel,
    SettlementCalculationLog,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameRow:
    id: int
    name: str
    currency: str
    status: GameStatus
    participants: list[str]
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


@dataclass(slots=True)
class TransactionRow:
    id: int
    game_id: int
    participant_id: str
    type: TransactionType
    amount: Decimal
    created_at: datetime


@dataclass(slots=True)
class SettlementRow:
    id: int
    game_id: int
    payer_id: str
    payee_id: str
    amount: Decimal
    status: SettlementStatus
    payment_method: str | None
    created_at: datetime
    completed_at: datetime | None


@dataclass(slots=True)
class CalculationLogRow:
    id: int
    game_id: int
    status: str
    error_message: str | None
    total_buyin: Decimal | None
    total_cashout: Decimal | None
    settlements_created: int
    created_at: datetime


def _settlement_row(model: SettlementModel) -> SettlementRow:
    return SettlementRow(
        id=model.id,
        game_id=model.game_id,
        payer_id=model.payer_id,
        payee_id=model.payee_id,
        amount=model.amount,
        status=SettlementStatus(model.status),
        payment_method=model.payment_method,
        created_at=model.created_at,
        completed_at=model.completed_at,
    )


def _transaction_row(model: LedgerTransaction) -> TransactionRow:
    return TransactionRow(
        id=model.id,
        game_id=model.game_id,
        participant_id=model.participant_id,
        type=TransactionType(model.type),
        amount=model.amount,
        created_at=model.created_at,
    )


class LedgerRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create_game(self, name: str, currency: str, participants: Iterable[str]) -> int:
        with self._session_factory() as db:
            game = Game(name=name, currency=currency, status=GameStatus.SCHEDULED.value)
            db.add(game)
            db.flush()
            db.add_all([GameParticipant(game_id=game.id, participant_id=participant) for participant in participants])
            db.commit()
            logger.info("created game %s", game.id)
            return game.id

    def get_game(self, game_id: int) -> GameRow | None:
        with self._session_factory() as db:
            game = db.get(Game, game_id)
            if game is None:
                return None

            participants = db.scalars(
                select(GameParticipant.participant_id)
                .where(GameParticipant.game_id == game_id)
                .order_by(GameParticipant.id)
            ).all()
            return GameRow(
                id=game.id,
                name=game.name,
                currency=game.currency,
                status=GameStatus(game.status),
                participants=list(participants),
                created_at=game.created_at,
                started_at=game.started_at,
                completed_at=game.completed_at,
            )

    def set_status(self, game_id: int, status: GameStatus) -> None:
        with self._session_factory() as db:
            game = db.get(Game, game_id)
            if game is None:
                raise ValueError("game not found")
            now = datetime.utcnow()
            game.status = status.value
            if status is GameStatus.IN_PROGRESS:
                game.started_at = now
            elif status is GameStatus.COMPLETED:
                game.completed_at = now
            db.commit()
            logger.info("game %s is now %s", game_id, status.value)

    def add_participant(self, game_id: int, participant_id: str) -> None:
        with self._session_factory() as db:
            db.add(GameParticipant(game_id=game_id, participant_id=participant_id))
            db.commit()

    def record_transaction(
        self,
        game_id: int,
        participant_id: str,
        transaction_type: TransactionType,
        amount: Decimal,
    ) -> TransactionRow:
        with self._session_factory() as db:
            transaction = LedgerTransaction(
                game_id=game_id,
                participant_id=participant_id,
                type=transaction_type.value,
                amount=amount,
            )
            db.add(transaction)
            db.flush()
            self._refresh_participant_totals(db, game_id, participant_id)
            db.commit()
            return _transaction_row(transaction)

    def _refresh_participant_totals(self, db: Session, game_id: int, participant_id: str) -> None:
        totals = dict(
            db.execute(
                select(LedgerTransaction.type, func.coalesce(func.sum(LedgerTransaction.amount), 0))
                .where(LedgerTransaction.game_id == game_id, LedgerTransaction.participant_id == participant_id)
                .group_by(LedgerTransaction.type)
            ).all()
        )
        participant = db.scalars(
            select(GameParticipant).where(
                GameParticipant.game_id == game_id,
                GameParticipant.participant_id == participant_id,
            )
        ).one()
        participant.total_buyin = to_money(totals.get(TransactionType.BUYIN.value, 0))
        participant.total_cashout = to_money(totals.get(TransactionType.CASHOUT.value, 0))

    def list_transactions(self, game_id: int) -> list[TransactionRow]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(LedgerTransaction).where(LedgerTransaction.game_id == game_id).order_by(LedgerTransaction.id)
            ).all()
            return [_transaction_row(row) for row in rows]

    def get_net_positions(self, game_id: int) -> dict[str, NetPosition]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(GameParticipant).where(GameParticipant.game_id == game_id).order_by(GameParticipant.id)
            ).all()
            return {
                row.participant_id: NetPosition(
                    participant_id=row.participant_id,
                    total_buyin=row.total_buyin,
                    total_cashout=row.total_cashout,
                )
                for row in rows
            }

    def save_settlements(self, game_id: int, settlements: Iterable[Settlement]) -> list[SettlementRow]:
        with self._session_factory() as db:
            models = [
                SettlementModel(
                    game_id=game_id,
                    payer_id=settlement.payer_id,
                    payee_id=settlement.payee_id,
                    amount=settlement.amount,
                    status=settlement.status.value,
                )
                for settlement in settlements
            ]
            db.add_all(models)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning("settlements for game %s were already stored", game_id)
                return self.list_settlements(game_id)
            return [_settlement_row(model) for model in models]

    def list_settlements(self, game_id: int) -> list[SettlementRow]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(SettlementModel).where(SettlementModel.game_id == game_id).order_by(SettlementModel.id)
            ).all()
            return [_settlement_row(row) for row in rows]

    def get_settlement(self, settlement_id: int) -> SettlementRow | None:
        with self._session_factory() as db:
            row = db.get(SettlementModel, settlement_id)
            return _settlement_row(row) if row is not None else None

    def complete_settlement(self, settlement_id: int, payment_method: str) -> SettlementRow:
        with self._session_factory() as db:
            row = db.get(SettlementModel, settlement_id)
            if row is None:
                raise ValueError("settlement not found")
            row.status = SettlementStatus.COMPLETED.value
            row.payment_method = payment_method
            row.completed_at = datetime.utcnow()
            db.commit()
            return _settlement_row(row)

    def log_calculation(
        self,
        game_id: int,
        status: str,
        *,
        error_message: str | None = None,
        total_buyin: Decimal | None = None,
        total_cashout: Decimal | None = None,
        settlements_created: int = 0,
    ) -> None:
        with self._session_factory() as db:
            db.add(
                SettlementCalculationLog(
                    game_id=game_id,
                    status=status,
                    error_message=error_message,
                    total_buyin=total_buyin,
                    total_cashout=total_cashout,
                    settlements_created=settlements_created,
                )
            )
            db.commit()

    def list_calculation_log(self, game_id: int) -> list[CalculationLogRow]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(SettlementCalculationLog)
                .where(SettlementCalculationLog.game_id == game_id)
                .order_by(SettlementCalculationLog.id)
            ).all()
            return [
                CalculationLogRow(
                    id=row.id,
                    game_id=row.game_id,
                    status=row.status,
                    error_message=row.error_message,
                    total_buyin=row.total_buyin,
                    total_cashout=row.total_cashout,
                    settlements_created=row.settlements_created,
                    created_at=row.created_at,
                )
                for row in rows
            ]
