from __future__ import annotations

from fastapi import APIRouter, Depends, status

from poker_ledger.api.schemas import (
    AddParticipantRequest,
    CalculationLogResponse,
    CreateGameRequest,
    CreateGameResponse,
    GameResponse,
    LedgerSummaryResponse,
    NetPositionResponse,
    SettlementResponse,
    TransactionRequest,
    TransactionResponse,
)
from poker_ledger.domain import GameStatus
from poker_ledger.runtime import get_service
from poker_ledger.service import LedgerService

router = APIRouter(prefix="/games", tags=["games"])


@router.post(
    "",
    response_model=CreateGameResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a scheduled game",
)
def create_game(payload: CreateGameRequest, service: LedgerService = Depends(get_service)) -> CreateGameResponse:
    game_id = service.start_game(payload.name, payload.participants, payload.currency)
    return CreateGameResponse(game_id=game_id, status=GameStatus.SCHEDULED)


@router.get("/{game_id}", response_model=GameResponse, summary="Game with its participants")
def get_game(game_id: int, service: LedgerService = Depends(get_service)) -> GameResponse:
    return GameResponse.model_validate(service.get_game(game_id))


@router.post("/{game_id}/start", response_model=GameResponse, summary="Move a scheduled game in progress")
def start_game(game_id: int, service: LedgerService = Depends(get_service)) -> GameResponse:
    return GameResponse.model_validate(service.begin_game(game_id))


@router.post("/{game_id}/participants", response_model=GameResponse, summary="Add a participant")
def add_participant(
    game_id: int,
    payload: AddParticipantRequest,
    service: LedgerService = Depends(get_service),
) -> GameResponse:
    return GameResponse.model_validate(service.add_participant(game_id, payload.participant_id))


@router.post(
    "/{game_id}/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a buy-in or cash-out",
)
def record_transaction(
    game_id: int,
    payload: TransactionRequest,
    service: LedgerService = Depends(get_service),
) -> TransactionResponse:
    row = service.record_transaction(game_id, payload.participant_id, payload.type, payload.amount)
    return TransactionResponse.model_validate(row)


@router.get("/{game_id}/transactions", response_model=list[TransactionResponse], summary="Game transactions")
def list_transactions(game_id: int, service: LedgerService = Depends(get_service)) -> list[TransactionResponse]:
    return [TransactionResponse.model_validate(row) for row in service.list_transactions(game_id)]


@router.get("/{game_id}/positions", response_model=list[NetPositionResponse], summary="Net position per participant")
def net_positions(game_id: int, service: LedgerService = Depends(get_service)) -> list[NetPositionResponse]:
    return [
        NetPositionResponse(
            participant_id=position.participant_id,
            total_buyin=position.total_buyin,
            total_cashout=position.total_cashout,
            net_result=position.net_result,
        )
        for position in service.get_net_positions(game_id).values()
    ]


@router.get("/{game_id}/validation", response_model=LedgerSummaryResponse, summary="Check buy-ins against cash-outs")
def validate_game(game_id: int, service: LedgerService = Depends(get_service)) -> LedgerSummaryResponse:
    return LedgerSummaryResponse.model_validate(service.validate_game(game_id))


@router.post("/{game_id}/complete", response_model=GameResponse, summary="Complete a balanced game")
def complete_game(game_id: int, service: LedgerService = Depends(get_service)) -> GameResponse:
    return GameResponse.model_validate(service.complete_game(game_id))


@router.post("/{game_id}/cancel", response_model=GameResponse, summary="Cancel a game")
def cancel_game(game_id: int, service: LedgerService = Depends(get_service)) -> GameResponse:
    return GameResponse.model_validate(service.cancel_game(game_id))


@router.post(
    "/{game_id}/settlements",
    response_model=list[SettlementResponse],
    summary="Calculate settlements (returns stored ones when already calculated)",
)
def calculate_settlements(game_id: int, service: LedgerService = Depends(get_service)) -> list[SettlementResponse]:
    return [SettlementResponse.model_validate(row) for row in service.calculate_settlements(game_id)]


@router.get("/{game_id}/settlements", response_model=list[SettlementResponse], summary="Stored settlements")
def list_settlements(game_id: int, service: LedgerService = Depends(get_service)) -> list[SettlementResponse]:
    return [SettlementResponse.model_validate(row) for row in service.get_settlements(game_id)]


@router.get(
    "/{game_id}/settlements/log",
    response_model=list[CalculationLogResponse],
    summary="Settlement calculation attempts",
)
def calculation_log(game_id: int, service: LedgerService = Depends(get_service)) -> list[CalculationLogResponse]:
    return [CalculationLogResponse.model_validate(row) for row in service.get_calculation_log(game_id)]
