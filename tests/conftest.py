from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from poker_ledger.main import app
from poker_ledger.runtime import get_service
from poker_ledger.service import LedgerService
from poker_ledger.storage import models  # noqa: F401
from poker_ledger.storage.database import Base, get_db
from poker_ledger.storage.repository import LedgerRepository


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    engine.dispose()


@pytest.fixture
def service(session_factory) -> LedgerService:
    return LedgerService(LedgerRepository(session_factory), epsilon=Decimal("0.01"))


@pytest.fixture
def client(session_factory, service: LedgerService):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_service] = lambda: service
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def play_game(service: LedgerService):
    """Create a game, record one buy-in and one cash-out per participant and complete it."""

    def _play(ledger: dict[str, tuple[str, str]], name: str = "home game") -> int:
        game_id = service.start_game(name, list(ledger))
        service.begin_game(game_id)
        for participant, (buyin, cashout) in ledger.items():
            service.record_transaction(game_id, participant, "buyin", Decimal(buyin))
            if Decimal(cashout) > 0:
                service.record_transaction(game_id, participant, "cashout", Decimal(cashout))
        service.complete_game(game_id)
        return game_id

    return _play
