"""Movement and balance checkpoint data models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RawMovement:
    """Movement record as received, before date parsing.

    This intermediate representation is what the request parser hands to
    the normalizer: schema-checked, but with the date still a string.
    """

    id: int
    date: str
    label: str
    amount: Decimal


@dataclass(frozen=True)
class RawBalance:
    """Balance control point as received, before date parsing."""

    date: str
    balance: Decimal


@dataclass(frozen=True)
class Movement:
    """A single bank transaction.

    Attributes:
        id: Externally assigned identifier (expected unique).
        date: Calendar date of the transaction.
        label: Free-text bank label, kept verbatim for reporting.
        amount: Signed amount (positive=credit, negative=debit).
    """

    id: int
    date: date
    label: str
    amount: Decimal

    def __repr__(self) -> str:
        return (
            f"Movement(id={self.id}, date={self.date}, "
            f"label={self.label[:30]!r}, amount={self.amount})"
        )


@dataclass(frozen=True)
class BalanceCheckpoint:
    """An externally asserted account balance at the end of a given day.

    Checkpoints carry no identifier; they are addressed by their position
    in the date-sorted sequence.
    """

    date: date
    balance: Decimal


@dataclass(frozen=True)
class ValidationRequest:
    """A batch of raw movements and balance control points to validate."""

    movements: tuple[RawMovement, ...] = ()
    balances: tuple[RawBalance, ...] = ()
