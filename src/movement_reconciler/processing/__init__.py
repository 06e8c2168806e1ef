"""Validation pipeline components."""

from movement_reconciler.processing.balance_reconciler import (
    BalanceReconciler,
    reconcile_balances,
)
from movement_reconciler.processing.deduplicator import (
    DuplicateDetector,
    detect_duplicates,
)
from movement_reconciler.processing.label_similarity import (
    SimilarityCache,
    are_labels_similar,
    normalize_label,
)
from movement_reconciler.processing.normalizer import (
    Normalizer,
    normalize_balances,
    normalize_movements,
)
from movement_reconciler.processing.validator import (
    MovementValidator,
    validate,
)

__all__ = [
    "Normalizer",
    "normalize_movements",
    "normalize_balances",
    "normalize_label",
    "are_labels_similar",
    "SimilarityCache",
    "DuplicateDetector",
    "detect_duplicates",
    "BalanceReconciler",
    "reconcile_balances",
    "MovementValidator",
    "validate",
]
