"""Normalizer converting raw records into typed, date-sorted sequences."""

from collections.abc import Iterable, Mapping
from typing import Any, Union

from movement_reconciler.models.movement import (
    BalanceCheckpoint,
    Movement,
    RawBalance,
    RawMovement,
)
from movement_reconciler.utils.date_utils import parse_iso_date
from movement_reconciler.utils.decimal_utils import to_decimal
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)

MovementInput = Union[Movement, RawMovement, Mapping[str, Any]]
BalanceInput = Union[BalanceCheckpoint, RawBalance, Mapping[str, Any]]


class Normalizer:
    """Parses dates and amounts, then sorts ascending by date.

    The normalizer:
    - Accepts typed models, raw records or plain dicts
    - Parses YYYY-MM-DD dates and converts amounts to Decimal
    - Sorts with a stable sort so same-day records keep their input order

    Date strings are assumed well-formed (the request parser guarantees it);
    a malformed date raises ValueError as a defect, not a finding.
    """

    def normalize_movements(self, records: Iterable[MovementInput]) -> list[Movement]:
        """Convert and sort movement records.

        Args:
            records: Movements in any accepted shape.

        Returns:
            New list of Movement sorted by date (stable).
        """
        movements = [self._to_movement(record) for record in records]
        # sorted() is stable: equal dates keep input order
        movements = sorted(movements, key=lambda m: m.date)
        logger.debug(f"Normalized {len(movements)} movements")
        return movements

    def normalize_balances(
        self, records: Iterable[BalanceInput]
    ) -> list[BalanceCheckpoint]:
        """Convert and sort balance checkpoint records.

        Args:
            records: Checkpoints in any accepted shape.

        Returns:
            New list of BalanceCheckpoint sorted by date (stable).
        """
        balances = [self._to_checkpoint(record) for record in records]
        balances = sorted(balances, key=lambda b: b.date)
        logger.debug(f"Normalized {len(balances)} balance checkpoints")
        return balances

    def _to_movement(self, record: MovementInput) -> Movement:
        if isinstance(record, Movement):
            return record
        if isinstance(record, RawMovement):
            return Movement(
                id=record.id,
                date=parse_iso_date(record.date),
                label=record.label,
                amount=to_decimal(record.amount),
            )
        return Movement(
            id=int(record["id"]),
            date=parse_iso_date(record["date"]),
            label=str(record["label"]),
            amount=to_decimal(record["amount"]),
        )

    def _to_checkpoint(self, record: BalanceInput) -> BalanceCheckpoint:
        if isinstance(record, BalanceCheckpoint):
            return record
        if isinstance(record, RawBalance):
            return BalanceCheckpoint(
                date=parse_iso_date(record.date),
                balance=to_decimal(record.balance),
            )
        return BalanceCheckpoint(
            date=parse_iso_date(record["date"]),
            balance=to_decimal(record["balance"]),
        )


def normalize_movements(records: Iterable[MovementInput]) -> list[Movement]:
    """Convenience function to parse and sort movements.

    Args:
        records: Movements in any accepted shape.

    Returns:
        Date-sorted movements.
    """
    return Normalizer().normalize_movements(records)


def normalize_balances(records: Iterable[BalanceInput]) -> list[BalanceCheckpoint]:
    """Convenience function to parse and sort balance checkpoints.

    Args:
        records: Checkpoints in any accepted shape.

    Returns:
        Date-sorted checkpoints.
    """
    return Normalizer().normalize_balances(records)
