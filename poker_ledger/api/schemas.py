from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from poker_ledger.domain import GameStatus, PaymentMethod, SettlementStatus, TransactionType


class CreateGameRequest(BaseModel):
    name: str = Field(default="", max_length=100, examples=["Friday night"])
    currency: str = Field(default="USD", min_length=3, max_length=3, examples=["USD"])
    participants: list[str] = Field(
        ...,
        description="Unique participant identifiers",
        examples=[["alice", "bob", "charlie"]],
    )

    @model_validator(mode="after")
    def validate_participants(self) -> "CreateGameRequest":
        if len(self.participants) < 2:
            raise ValueError("a game needs at least 2 participants")
        if len(set(self.participants)) != len(self.participants):
            raise ValueError("participants must be unique")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Friday night",
                    "currency": "USD",
                    "participants": ["alice", "bob", "charlie"],
                }
            ]
        }
    }


class CreateGameResponse(BaseModel):
    game_id: int
    status: GameStatus


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    currency: str
    status: GameStatus
    participants: list[str]
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class AddParticipantRequest(BaseModel):
    participant_id: str = Field(..., min_length=1, examples=["dave"])


class TransactionRequest(BaseModel):
    participant_id: str = Field(..., min_length=1, examples=["alice"])
    type: TransactionType
    amount: Decimal = Field(..., gt=0, le=Decimal("10000.00"), decimal_places=2, examples=["100.00"])


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    game_id: int
    participant_id: str
    type: TransactionType
    amount: Decimal
    created_at: datetime


class NetPositionResponse(BaseModel):
    participant_id: str
    total_buyin: Decimal
    total_cashout: Decimal
    net_result: Decimal


class LedgerSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    total_buyin: Decimal
    total_cashout: Decimal
    difference: Decimal
    message: str


class SettlementResponse(BaseModel):
    id: int
    game_id: int
    payer_id: str
    payee_id: str
    amount: Decimal
    status: SettlementStatus
    payment_method: str | None = None
    created_at: datetime
    completed_at: datetime | None = None

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "game_id": 7,
                    "payer_id": "bob",
                    "payee_id": "alice",
                    "amount": "50.00",
                    "status": "pending",
                    "payment_method": None,
                    "created_at": "2026-01-04T21:30:00",
                    "completed_at": None,
                }
            ]
        },
    )


class CompleteSettlementRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CASH


class CalculationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    game_id: int
    status: str
    error_message: str | None = None
    total_buyin: Decimal | None = None
    total_cashout: Decimal | None = None
    settlements_created: int
    created_at: datetime
