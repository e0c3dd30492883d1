from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from poker_ledger.api.errors import domain_error
from poker_ledger.api.games import router as games_router
from poker_ledger.api.settlements import router as settlements_router
from poker_ledger.api.stats import router as stats_router
from poker_ledger.config import settings
from poker_ledger.domain import DomainValidationError
from poker_ledger.storage.database import init_db

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("poker ledger API ready")
    yield


app = FastAPI(title="Poker Ledger API", lifespan=lifespan)
app.include_router(games_router)
app.include_router(settlements_router)
app.include_router(stats_router)


@app.exception_handler(DomainValidationError)
async def handle_domain_error(_: Request, exc: DomainValidationError) -> JSONResponse:
    error = domain_error(exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})
