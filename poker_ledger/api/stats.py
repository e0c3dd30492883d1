from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from poker_ledger.services.stats_service import get_leaderboard, get_player_statistics
from poker_ledger.storage.database import get_db

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/balance")
def stats_balance(
    period_days: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
) -> dict:
    entries = get_leaderboard(db, period_days=period_days)
    return {
        "period_days": period_days,
        "players": [
            {
                "participant_id": entry.participant_id,
                "games_played": entry.games_played,
                "net_result": str(entry.net_result),
            }
            for entry in entries
        ],
    }


@router.get("/player/{participant_id}")
def player_stats(participant_id: str, db: Session = Depends(get_db)) -> dict:
    stats = get_player_statistics(db, participant_id)
    return {
        "participant_id": stats.participant_id,
        "games_played": stats.games_played,
        "total_buyin": str(stats.total_buyin),
        "total_cashout": str(stats.total_cashout),
        "net_profit": str(stats.net_profit),
        "biggest_win": str(stats.biggest_win),
        "biggest_loss": str(stats.biggest_loss),
        "history": [
            {
                "game_id": entry.game_id,
                "completed_at": entry.completed_at.isoformat() if entry.completed_at else None,
                "total_buyin": str(entry.total_buyin),
                "total_cashout": str(entry.total_cashout),
                "net_result": str(entry.net_result),
            }
            for entry in stats.history
        ],
    }
