from .errors import (
    ConflictError,
    DomainValidationError,
    InvalidAmount,
    LedgerImbalance,
    NotFoundError,
    ResidualMismatch,
)
from .game import (
    GameStatus,
    PaymentMethod,
    SettlementStatus,
    ensure_transition,
    normalize_participant,
    to_decimal,
    to_money,
    unique_preserve_order,
    validate_participant_total,
    validate_roster,
    validate_transaction_amount,
)
from .ledger import (
    DEFAULT_EPSILON,
    LedgerSummary,
    NetPosition,
    Transaction,
    TransactionType,
    compute_net_positions,
    ensure_balanced,
    ledger_totals,
    net_results,
    summarize_ledger,
)
from .settlement import (
    Settlement,
    SettlementPlan,
    build_settlement_plan,
    compute_settlements,
)
from .validation import (
    ValidationReport,
    apply_settlements,
    ensure_settlements_balance,
    validate_settlements,
)

__all__ = [
    "DEFAULT_EPSILON",
    "ConflictError",
    "DomainValidationError",
    "GameStatus",
    "InvalidAmount",
    "LedgerImbalance",
    "LedgerSummary",
    "NetPosition",
    "NotFoundError",
    "PaymentMethod",
    "ResidualMismatch",
    "Settlement",
    "SettlementPlan",
    "SettlementStatus",
    "Transaction",
    "TransactionType",
    "ValidationReport",
    "apply_settlements",
    "build_settlement_plan",
    "compute_net_positions",
    "compute_settlements",
    "ensure_balanced",
    "ensure_settlements_balance",
    "ensure_transition",
    "ledger_totals",
    "net_results",
    "normalize_participant",
    "summarize_ledger",
    "to_decimal",
    "to_money",
    "unique_preserve_order",
    "validate_participant_total",
    "validate_roster",
    "validate_settlements",
    "validate_transaction_amount",
]
