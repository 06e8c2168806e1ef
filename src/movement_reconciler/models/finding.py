"""Validation finding and verdict models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from movement_reconciler.utils.date_utils import date_to_iso_instant
from movement_reconciler.utils.decimal_utils import decimal_to_number

ACCEPTED_MESSAGE = "Accepted"
REJECTED_MESSAGE = "Validation failed"


class FindingKind(Enum):
    """Class of discrepancy reported by the engine."""

    BALANCE_MISMATCH = "BALANCE_MISMATCH"
    DUPLICATE_TRANSACTION = "DUPLICATE_TRANSACTION"
    MISSING_TRANSACTION = "MISSING_TRANSACTION"
    INVALID_DATE_ORDER = "INVALID_DATE_ORDER"


class DuplicateType(Enum):
    """How two movements were matched as duplicates."""

    EXACT = "exact"  # Identical normalized label
    SIMILAR = "similar"  # Containment or edit similarity above threshold


@dataclass(frozen=True)
class DuplicateRecord:
    """A movement flagged as a duplicate.

    Attributes:
        movement_id: ID of the flagged movement.
        date: Movement date.
        amount: Movement amount.
        label: Original (non-normalized) label.
        duplicate_type: Exact or similar match.
    """

    movement_id: int
    date: date
    amount: Decimal
    label: str
    duplicate_type: DuplicateType

    def to_dict(self) -> dict[str, Any]:
        """Render as a response payload entry."""
        return {
            "id": self.movement_id,
            "date": date_to_iso_instant(self.date),
            "amount": decimal_to_number(self.amount),
            "label": self.label,
            "duplicateType": self.duplicate_type.value,
        }


def _render_detail(value: object) -> object:
    """Convert detail values into JSON-compatible objects."""
    if isinstance(value, Decimal):
        return decimal_to_number(value)
    if isinstance(value, date):
        return date_to_iso_instant(value)
    if isinstance(value, DuplicateRecord):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_render_detail(v) for v in value]
    return value


@dataclass(frozen=True)
class ValidationFinding:
    """One itemized reason for rejecting a batch.

    Details keep typed values (date, Decimal, DuplicateRecord); to_dict()
    renders them into the response shapes.

    Attributes:
        kind: Finding class.
        message: Human-readable explanation.
        details: Kind-specific payload.
    """

    kind: FindingKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render as a response reason."""
        return {
            "type": self.kind.value,
            "message": self.message,
            "details": {k: _render_detail(v) for k, v in self.details.items()},
        }


@dataclass(frozen=True)
class Verdict:
    """Binary accept/reject outcome carrying every finding."""

    findings: tuple[ValidationFinding, ...] = ()

    @property
    def accepted(self) -> bool:
        """True when no finding was produced."""
        return not self.findings

    @property
    def message(self) -> str:
        return ACCEPTED_MESSAGE if self.accepted else REJECTED_MESSAGE

    def findings_of(self, kind: FindingKind) -> list[ValidationFinding]:
        """Return the findings of one kind, in emission order."""
        return [f for f in self.findings if f.kind is kind]

    def grouped_findings(self) -> dict[FindingKind, list[ValidationFinding]]:
        """Group findings by kind, keyed in first-occurrence order."""
        groups: dict[FindingKind, list[ValidationFinding]] = {}
        for finding in self.findings:
            groups.setdefault(finding.kind, []).append(finding)
        return groups

    def to_dict(self, group_by_kind: bool = False) -> dict[str, Any]:
        """Render the response document.

        Args:
            group_by_kind: Emit one reason per kind with an "errors" list
                instead of one reason per finding.

        Returns:
            {"message": "Accepted"} or
            {"message": "Validation failed", "reasons": [...]}.
        """
        if self.accepted:
            return {"message": ACCEPTED_MESSAGE}

        if not group_by_kind:
            reasons = [finding.to_dict() for finding in self.findings]
        else:
            reasons = []
            for kind, findings in self.grouped_findings().items():
                reasons.append({
                    "type": kind.value,
                    "errors": [
                        {"message": r["message"], "details": r["details"]}
                        for r in (f.to_dict() for f in findings)
                    ],
                })

        return {"message": REJECTED_MESSAGE, "reasons": reasons}
