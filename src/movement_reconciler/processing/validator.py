"""Validation pipeline: parse, check order, detect duplicates, reconcile."""

from collections.abc import Iterable
from typing import Optional

from movement_reconciler.config import Config
from movement_reconciler.models.finding import ValidationFinding, Verdict
from movement_reconciler.models.movement import ValidationRequest
from movement_reconciler.processing.balance_reconciler import BalanceReconciler
from movement_reconciler.processing.deduplicator import DuplicateDetector
from movement_reconciler.processing.normalizer import (
    BalanceInput,
    MovementInput,
    Normalizer,
)
from movement_reconciler.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


class MovementValidator:
    """Runs every check over one batch and returns a single verdict.

    Findings are emitted in a fixed order: date order, duplicates, then
    balance reconciliation. Any finding rejects the batch.

    Holds no state between calls; one instance may serve concurrent callers.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize validator.

        Args:
            config: Application configuration (defaults used when None).
        """
        self.config = config or Config()
        self.normalizer = Normalizer()
        self.duplicate_detector = DuplicateDetector(
            sort_by_id=self.config.output.sort_duplicates_by_id
        )
        self.balance_reconciler = BalanceReconciler()

    def validate(
        self,
        movements: Iterable[MovementInput],
        balances: Iterable[BalanceInput],
    ) -> Verdict:
        """Validate movements against balance control points.

        Args:
            movements: Movements (typed, raw records or dicts), any order.
            balances: Control points (typed, raw records or dicts), any order.

        Returns:
            Accepted verdict, or rejected verdict carrying every finding.
        """
        movement_records = list(movements)
        balance_records = list(balances)

        with LogContext(
            logger,
            "validation",
            movements=len(movement_records),
            balances=len(balance_records),
        ):
            sorted_movements = self.normalizer.normalize_movements(movement_records)
            sorted_balances = self.normalizer.normalize_balances(balance_records)

            findings: list[ValidationFinding] = []
            findings.extend(self.balance_reconciler.check_date_order(sorted_balances))

            duplicates = self.duplicate_detector.report(sorted_movements)
            if duplicates is not None:
                findings.append(duplicates)

            findings.extend(
                self.balance_reconciler.reconcile(sorted_balances, sorted_movements)
            )

        verdict = Verdict(findings=tuple(findings))
        if verdict.accepted:
            logger.info(
                f"Accepted {len(sorted_movements)} movements against "
                f"{len(sorted_balances)} control points"
            )
        else:
            logger.info(f"Rejected batch with {len(findings)} finding(s)")
        return verdict

    def validate_request(self, request: ValidationRequest) -> Verdict:
        """Validate a parsed request.

        Args:
            request: Schema-checked request.

        Returns:
            Verdict for the request.
        """
        return self.validate(request.movements, request.balances)


def validate(
    movements: Iterable[MovementInput],
    balances: Iterable[BalanceInput],
    config: Optional[Config] = None,
) -> Verdict:
    """Convenience function to validate one batch.

    Args:
        movements: Movements in any accepted shape.
        balances: Control points in any accepted shape.
        config: Application configuration.

    Returns:
        Verdict for the batch.
    """
    return MovementValidator(config).validate(movements, balances)
