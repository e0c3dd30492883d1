from __future__ import annotations

from poker_ledger.config import settings
from poker_ledger.service import LedgerService
from poker_ledger.storage.database import SessionLocal
from poker_ledger.storage.repository import LedgerRepository

repo = LedgerRepository(SessionLocal)
service = LedgerService(repo, epsilon=settings.ledger_epsilon)


def get_service() -> LedgerService:
    return service
