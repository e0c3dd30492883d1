from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from poker_ledger.domain import GameStatus, to_money
from poker_ledger.storage.models import Game, GameParticipant

ZERO = Decimal("0.00")


@dataclass
class GameResultEntry:
    game_id: int
    completed_at: datetime | None
    total_buyin: Decimal
    total_cashout: Decimal

    @property
    def net_result(self) -> Decimal:
        return self.total_cashout - self.total_buyin


@dataclass
class PlayerStatistics:
    participant_id: str
    games_played: int = 0
    total_buyin: Decimal = ZERO
    total_cashout: Decimal = ZERO
    net_profit: Decimal = ZERO
    biggest_win: Decimal = ZERO
    biggest_loss: Decimal = ZERO
    history: list[GameResultEntry] = field(default_factory=list)


@dataclass
class LeaderboardEntry:
    participant_id: str
    games_played: int
    net_result: Decimal


def get_player_statistics(db: Session, participant_id: str) -> PlayerStatistics:
    """Totals and per-game history for one participant over completed games."""
    rows = db.execute(
        select(
            GameParticipant.game_id,
            Game.completed_at,
            GameParticipant.total_buyin,
            GameParticipant.total_cashout,
        )
        .join(Game, Game.id == GameParticipant.game_id)
        .where(and_(Game.status == GameStatus.COMPLETED.value, GameParticipant.participant_id == participant_id))
        .order_by(Game.completed_at.desc().nullslast(), GameParticipant.game_id.desc())
    ).all()

    stats = PlayerStatistics(participant_id=participant_id)
    for row in rows:
        entry = GameResultEntry(
            game_id=row.game_id,
            completed_at=row.completed_at,
            total_buyin=to_money(row.total_buyin),
            total_cashout=to_money(row.total_cashout),
        )
        stats.history.append(entry)
        stats.games_played += 1
        stats.total_buyin += entry.total_buyin
        stats.total_cashout += entry.total_cashout
        stats.net_profit += entry.net_result
        stats.biggest_win = max(stats.biggest_win, entry.net_result)
        stats.biggest_loss = min(stats.biggest_loss, entry.net_result)
    return stats


def get_leaderboard(db: Session, *, period_days: int | None = None) -> list[LeaderboardEntry]:
    filters = [Game.status == GameStatus.COMPLETED.value]
    if period_days is not None:
        since = datetime.utcnow() - timedelta(days=period_days)
        filters.append(Game.completed_at >= since)

    net = func.sum(GameParticipant.total_cashout - GameParticipant.total_buyin)
    rows = db.execute(
        select(
            GameParticipant.participant_id,
            func.count(GameParticipant.game_id).label("games_played"),
            func.coalesce(net, 0).label("net"),
        )
        .join(Game, Game.id == GameParticipant.game_id)
        .where(and_(*filters))
        .group_by(GameParticipant.participant_id)
    ).all()

    entries = [
        LeaderboardEntry(
            participant_id=row.participant_id,
            games_played=int(row.games_played),
            net_result=to_money(row.net),
        )
        for row in rows
    ]
    entries.sort(key=lambda entry: (-entry.net_result, entry.participant_id))
    return entries
