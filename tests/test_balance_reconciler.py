"""Tests for balance reconciliation."""

from datetime import date
from decimal import Decimal

from movement_reconciler.models.finding import FindingKind
from movement_reconciler.models.movement import BalanceCheckpoint, Movement
from movement_reconciler.processing.balance_reconciler import (
    INVALID_ORDER_MESSAGE,
    NO_BALANCES_MESSAGE,
    BalanceReconciler,
    reconcile_balances,
)


def make_movement(movement_id: int, day: date, amount: str) -> Movement:
    """Create a test movement."""
    return Movement(id=movement_id, date=day, label=f"M{movement_id}", amount=Decimal(amount))


def make_balance(day: date, balance: str) -> BalanceCheckpoint:
    """Create a test control point."""
    return BalanceCheckpoint(date=day, balance=Decimal(balance))


JAN_01 = date(2024, 1, 1)
JAN_15 = date(2024, 1, 15)
JAN_31 = date(2024, 1, 31)
FEB_10 = date(2024, 2, 10)
FEB_29 = date(2024, 2, 29)


class TestCheckDateOrder:
    """Tests for BalanceReconciler.check_date_order."""

    def test_ascending_dates_pass(self) -> None:
        """Test strictly ascending control points."""
        balances = [make_balance(JAN_01, "0"), make_balance(JAN_31, "10")]
        assert BalanceReconciler().check_date_order(balances) == []

    def test_equal_dates_flagged(self) -> None:
        """Test that two control points on the same day are flagged."""
        balances = [make_balance(JAN_31, "10"), make_balance(JAN_31, "20")]

        findings = BalanceReconciler().check_date_order(balances)

        assert len(findings) == 1
        assert findings[0].kind is FindingKind.INVALID_DATE_ORDER
        assert findings[0].message == INVALID_ORDER_MESSAGE
        assert findings[0].details == {"balanceDate": JAN_31}

    def test_single_balance(self) -> None:
        """Test that one control point is trivially ordered."""
        assert BalanceReconciler().check_date_order([make_balance(JAN_01, "0")]) == []


class TestReconcile:
    """Tests for BalanceReconciler.reconcile."""

    def test_no_balances(self) -> None:
        """Test that missing control points produce a single mismatch."""
        findings = reconcile_balances([], [make_movement(1, JAN_15, "10")])

        assert len(findings) == 1
        assert findings[0].kind is FindingKind.BALANCE_MISMATCH
        assert findings[0].message == NO_BALANCES_MESSAGE
        assert findings[0].details == {}

    def test_no_movements_trusts_balances(self) -> None:
        """Test that control points alone are never contradicted."""
        balances = [make_balance(JAN_01, "100"), make_balance(JAN_31, "999")]
        assert reconcile_balances(balances, []) == []

    def test_matching_windows(self) -> None:
        """Test a fully reconciled sequence."""
        balances = [make_balance(JAN_31, "1000"), make_balance(FEB_29, "1929.50")]
        movements = [
            make_movement(1, JAN_15, "1000"),
            make_movement(2, FEB_10, "-70.50"),
            make_movement(3, FEB_10, "1000"),
        ]

        assert reconcile_balances(balances, movements) == []

    def test_first_balance_without_prior_movements_trusted(self) -> None:
        """Test that an opening statement with no earlier movements is trusted."""
        balances = [make_balance(JAN_01, "500"), make_balance(JAN_31, "510")]
        movements = [make_movement(1, JAN_15, "10")]

        assert reconcile_balances(balances, movements) == []

    def test_first_balance_mismatch(self) -> None:
        """Test that the first control point is checked from zero."""
        balances = [make_balance(JAN_31, "50")]
        movements = [make_movement(1, JAN_15, "40")]

        findings = reconcile_balances(balances, movements)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.message == (
            "Balance mismatch at first control point 2024-01-31T00:00:00.000Z"
        )
        assert finding.details["expectedBalance"] == Decimal("40")
        assert finding.details["actualBalance"] == Decimal("50")
        assert finding.details["difference"] == Decimal("-10")

    def test_window_mismatch_details(self) -> None:
        """Test the reported values for a wrong later control point."""
        balances = [make_balance(JAN_31, "1000"), make_balance(FEB_29, "2000")]
        movements = [
            make_movement(1, JAN_15, "1000"),
            make_movement(2, FEB_10, "-70.50"),
            make_movement(3, FEB_10, "1000"),
        ]

        findings = reconcile_balances(balances, movements)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.kind is FindingKind.BALANCE_MISMATCH
        assert finding.message == "Balance mismatch at control point 2024-02-29T00:00:00.000Z"
        assert finding.details == {
            "balanceDate": FEB_29,
            "expectedBalance": Decimal("1929.50"),
            "actualBalance": Decimal("2000"),
            "difference": Decimal("-70.50"),
        }

    def test_movement_on_checkpoint_date_belongs_to_that_window(self) -> None:
        """Test that windows are closed on the right."""
        balances = [make_balance(JAN_01, "0"), make_balance(JAN_31, "25")]
        movements = [make_movement(1, JAN_31, "25")]

        assert reconcile_balances(balances, movements) == []

    def test_tolerance_inclusive(self) -> None:
        """Test that a one-cent difference is accepted."""
        balances = [make_balance(JAN_31, "10.01")]
        movements = [make_movement(1, JAN_15, "10")]

        assert reconcile_balances(balances, movements) == []

    def test_beyond_tolerance(self) -> None:
        """Test that a difference above one cent is reported."""
        balances = [make_balance(JAN_31, "10.02")]
        movements = [make_movement(1, JAN_15, "10")]

        assert len(reconcile_balances(balances, movements)) == 1

    def test_custom_tolerance(self) -> None:
        """Test that the tolerance can be widened."""
        balances = [make_balance(JAN_31, "11")]
        movements = [make_movement(1, JAN_15, "10")]

        reconciler = BalanceReconciler(tolerance=Decimal("1"))
        assert reconciler.reconcile(balances, movements) == []

    def test_no_cascade_after_wrong_checkpoint(self) -> None:
        """Test that each window is measured from the stated previous balance."""
        balances = [
            make_balance(JAN_01, "0"),
            make_balance(JAN_15, "999"),
            make_balance(JAN_31, "1009"),
        ]
        movements = [
            make_movement(1, date(2024, 1, 10), "100"),
            make_movement(2, date(2024, 1, 20), "10"),
        ]

        findings = reconcile_balances(balances, movements)

        assert len(findings) == 1
        assert findings[0].details["balanceDate"] == JAN_15

    def test_trailing_movements(self) -> None:
        """Test that movements after the last control point are reported once."""
        balances = [make_balance(JAN_31, "100")]
        movements = [
            make_movement(1, JAN_15, "100"),
            make_movement(2, FEB_10, "-20"),
            make_movement(3, FEB_29, "5.25"),
        ]

        findings = reconcile_balances(balances, movements)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.kind is FindingKind.MISSING_TRANSACTION
        assert finding.message.startswith("There are 2 movement(s) after the last")
        assert finding.details == {
            "periodStart": JAN_31,
            "periodEnd": FEB_29,
            "missingAmount": Decimal("-14.75"),
        }

    def test_findings_in_check_order(self) -> None:
        """Test first, window and trailing findings come out in that order."""
        balances = [make_balance(JAN_15, "1"), make_balance(JAN_31, "1")]
        movements = [
            make_movement(1, JAN_01, "10"),
            make_movement(2, date(2024, 1, 20), "5"),
            make_movement(3, FEB_10, "3"),
        ]

        findings = reconcile_balances(balances, movements)

        assert [f.kind for f in findings] == [
            FindingKind.BALANCE_MISMATCH,
            FindingKind.BALANCE_MISMATCH,
            FindingKind.MISSING_TRANSACTION,
        ]
        assert findings[0].message.startswith("Balance mismatch at first control point")
