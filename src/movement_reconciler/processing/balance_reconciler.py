"""Balance continuity checks between control points."""

from decimal import Decimal
from typing import Optional

from movement_reconciler.models.finding import FindingKind, ValidationFinding
from movement_reconciler.models.movement import BalanceCheckpoint, Movement
from movement_reconciler.utils.date_utils import date_to_iso_instant
from movement_reconciler.utils.decimal_utils import (
    BALANCE_TOLERANCE,
    sum_amounts,
    within_tolerance,
)
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

INVALID_ORDER_MESSAGE = "Balance control points must be in chronological order"
NO_BALANCES_MESSAGE = "No balance control points provided"


class BalanceReconciler:
    """Checks that movements explain every balance control point.

    Checks performed, over date-sorted inputs:
    - Control points are strictly ascending by date
    - The first control point equals the sum of movements up to its date
      (implicit opening balance of zero), unless no movement precedes it
    - Each later control point equals its predecessor's stated balance plus
      the movements in (previous date, current date]
    - Movements after the last control point are reported as missing coverage

    Each window is checked against the predecessor's stated balance, so one
    wrong control point does not cascade into every later window.
    """

    def __init__(self, tolerance: Decimal = BALANCE_TOLERANCE):
        """Initialize balance reconciler.

        Args:
            tolerance: Absolute tolerance for balance equality.
        """
        self.tolerance = tolerance

    def check_date_order(
        self, balances: list[BalanceCheckpoint]
    ) -> list[ValidationFinding]:
        """Flag control points not strictly after their predecessor.

        Equal dates count as disordered.

        Args:
            balances: Control points in date-sorted order.

        Returns:
            One INVALID_DATE_ORDER finding per offending control point.
        """
        findings: list[ValidationFinding] = []
        for previous, current in zip(balances, balances[1:]):
            if current.date <= previous.date:
                findings.append(
                    ValidationFinding(
                        kind=FindingKind.INVALID_DATE_ORDER,
                        message=INVALID_ORDER_MESSAGE,
                        details={"balanceDate": current.date},
                    )
                )
        if findings:
            logger.info(f"Found {len(findings)} out-of-order balance control points")
        return findings

    def reconcile(
        self,
        balances: list[BalanceCheckpoint],
        movements: list[Movement],
    ) -> list[ValidationFinding]:
        """Verify balances against movement sums.

        Args:
            balances: Control points sorted ascending by date.
            movements: Movements sorted ascending by date.

        Returns:
            BALANCE_MISMATCH and MISSING_TRANSACTION findings, in check order.
        """
        if not balances:
            logger.info("No balance control points provided")
            return [
                ValidationFinding(
                    kind=FindingKind.BALANCE_MISMATCH,
                    message=NO_BALANCES_MESSAGE,
                    details={},
                )
            ]

        if not movements:
            # Nothing contradicts the stated balances
            logger.debug("No movements: balance control points trusted as stated")
            return []

        findings: list[ValidationFinding] = []

        first_finding = self._check_first_balance(balances[0], movements)
        if first_finding is not None:
            findings.append(first_finding)

        findings.extend(self._check_subsequent_balances(balances, movements))

        missing = self._check_movements_after_last_balance(balances[-1], movements)
        if missing is not None:
            findings.append(missing)

        logger.info(
            f"Reconciled {len(balances)} control points against "
            f"{len(movements)} movements: {len(findings)} finding(s)"
        )
        return findings

    def _check_first_balance(
        self, first: BalanceCheckpoint, movements: list[Movement]
    ) -> Optional[ValidationFinding]:
        """Validate the first control point from an opening balance of zero.

        Args:
            first: First control point.
            movements: Date-sorted movements.

        Returns:
            BALANCE_MISMATCH finding, or None.
        """
        up_to_first = [m for m in movements if m.date <= first.date]
        if not up_to_first:
            # No evidence before the first statement: trust it
            return None

        expected = sum_amounts(m.amount for m in up_to_first)
        logger.debug(
            f"First control point {first.date}: {len(up_to_first)} movements, "
            f"expected={expected}, actual={first.balance}"
        )
        return self._compare(
            first,
            expected,
            f"Balance mismatch at first control point {date_to_iso_instant(first.date)}",
        )

    def _check_subsequent_balances(
        self, balances: list[BalanceCheckpoint], movements: list[Movement]
    ) -> list[ValidationFinding]:
        """Validate each control point against its predecessor.

        Args:
            balances: Date-sorted control points.
            movements: Date-sorted movements.

        Returns:
            BALANCE_MISMATCH findings.
        """
        findings: list[ValidationFinding] = []

        for previous, current in zip(balances, balances[1:]):
            window = [m for m in movements if previous.date < m.date <= current.date]
            expected = previous.balance + sum_amounts(m.amount for m in window)
            logger.debug(
                f"Window ({previous.date}, {current.date}]: {len(window)} movements, "
                f"expected={expected}, actual={current.balance}"
            )
            finding = self._compare(
                current,
                expected,
                f"Balance mismatch at control point {date_to_iso_instant(current.date)}",
            )
            if finding is not None:
                findings.append(finding)

        return findings

    def _check_movements_after_last_balance(
        self, last: BalanceCheckpoint, movements: list[Movement]
    ) -> Optional[ValidationFinding]:
        """Report movements no control point accounts for.

        Args:
            last: Last control point.
            movements: Date-sorted movements.

        Returns:
            MISSING_TRANSACTION finding, or None.
        """
        trailing = [m for m in movements if m.date > last.date]
        if not trailing:
            return None

        return ValidationFinding(
            kind=FindingKind.MISSING_TRANSACTION,
            message=(
                f"There are {len(trailing)} movement(s) after the last balance "
                "control point. This may indicate missing balance control points "
                "or missing transactions."
            ),
            details={
                "periodStart": last.date,
                "periodEnd": max(m.date for m in trailing),
                "missingAmount": sum_amounts(m.amount for m in trailing),
            },
        )

    def _compare(
        self, checkpoint: BalanceCheckpoint, expected: Decimal, message: str
    ) -> Optional[ValidationFinding]:
        if within_tolerance(expected, checkpoint.balance, self.tolerance):
            return None
        return ValidationFinding(
            kind=FindingKind.BALANCE_MISMATCH,
            message=message,
            details={
                "balanceDate": checkpoint.date,
                "expectedBalance": expected,
                "actualBalance": checkpoint.balance,
                "difference": expected - checkpoint.balance,
            },
        )


def reconcile_balances(
    balances: list[BalanceCheckpoint],
    movements: list[Movement],
) -> list[ValidationFinding]:
    """Convenience function to reconcile balances against movements.

    Args:
        balances: Date-sorted control points.
        movements: Date-sorted movements.

    Returns:
        Balance findings.
    """
    return BalanceReconciler().reconcile(balances, movements)
