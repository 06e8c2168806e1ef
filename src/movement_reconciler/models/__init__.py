"""Data models for movements, balance checkpoints and validation findings."""

from movement_reconciler.models.finding import (
    DuplicateRecord,
    DuplicateType,
    FindingKind,
    ValidationFinding,
    Verdict,
)
from movement_reconciler.models.movement import (
    BalanceCheckpoint,
    Movement,
    RawBalance,
    RawMovement,
    ValidationRequest,
)

__all__ = [
    "RawMovement",
    "RawBalance",
    "Movement",
    "BalanceCheckpoint",
    "ValidationRequest",
    "FindingKind",
    "DuplicateType",
    "DuplicateRecord",
    "ValidationFinding",
    "Verdict",
]
