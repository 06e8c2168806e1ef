"""Decimal utilities for monetary calculations.

All amounts and balances are Decimal so sums over many movements do not drift.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable

# Absolute tolerance below which two monetary values are considered equal
BALANCE_TOLERANCE = Decimal("0.01")

# Largest finite IEEE 754 double; JSON numbers above it read as Infinity elsewhere
MAX_FINITE_NUMBER = Decimal("1.7976931348623157e308")


def to_decimal(value: object) -> Decimal:
    """Convert a numeric value to a finite Decimal.

    Floats go through their string form so 120.5 becomes Decimal("120.5")
    rather than its binary expansion.

    Args:
        value: int, float, str or Decimal.

    Returns:
        Decimal value.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float, str)):
            result = Decimal(str(value).strip())
        else:
            raise ValueError(f"Not a number: {value!r}")
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse amount '{value}': {e}") from e

    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def is_finite_number(value: object) -> bool:
    """Check whether a value is a finite number within double range.

    Args:
        value: Value to check.

    Returns:
        True if to_decimal would accept it and its magnitude does not
        exceed MAX_FINITE_NUMBER (so 1e999 is rejected as Infinity).
    """
    if isinstance(value, str):
        # Only real JSON numbers are accepted on input
        return False
    try:
        amount = to_decimal(value)
    except ValueError:
        return False
    return abs(amount) <= MAX_FINITE_NUMBER


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts.

    Args:
        amounts: Decimal amounts.

    Returns:
        Sum as Decimal (Decimal("0") when empty).
    """
    total = Decimal("0")
    for amount in amounts:
        total += amount
    return total


def within_tolerance(
    expected: Decimal, actual: Decimal, tolerance: Decimal = BALANCE_TOLERANCE
) -> bool:
    """Check that two amounts differ by no more than the tolerance.

    Args:
        expected: Expected amount.
        actual: Actual amount.
        tolerance: Absolute tolerance (inclusive).

    Returns:
        True if abs(expected - actual) <= tolerance.
    """
    return abs(expected - actual) <= tolerance


def round_cents(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places (half up).

    Args:
        amount: Amount to round.

    Returns:
        Rounded amount.
    """
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def decimal_to_number(amount: Decimal) -> int | float:
    """Convert a Decimal into the JSON number it represents.

    Integral values become int (3000 rather than 3000.0).

    Args:
        amount: Decimal amount.

    Returns:
        int or float.
    """
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)
