"""Request document parsing and schema validation."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from movement_reconciler.config import Config
from movement_reconciler.models.movement import RawBalance, RawMovement, ValidationRequest
from movement_reconciler.parsers.base import ParseError, RequestValidationError
from movement_reconciler.utils.date_utils import (
    earliest_allowed_date,
    is_iso_date,
    latest_allowed_date,
    parse_iso_date,
)
from movement_reconciler.utils.decimal_utils import is_finite_number, to_decimal
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


class RequestParser:
    """Turns an untrusted request document into a ValidationRequest.

    Checks performed:
    - Top level is an object with "movements" and "balances" lists
    - Movement ids are integers, labels are strings
    - Amounts and balances are finite numbers
    - Dates are real YYYY-MM-DD calendar dates, not in the future and not too old
    - Balances are only accepted together with a movements list

    All violations are collected before raising, so one call reports
    every problem in the document.
    """

    def __init__(self, config: Optional[Config] = None, today: Optional[date] = None):
        """Initialize request parser.

        Args:
            config: Application configuration (defaults used when None).
            today: Reference date for the future/age checks (default: today).
        """
        self.config = config or Config()
        self.today = today

    def parse_file(self, file_path: Path) -> ValidationRequest:
        """Read and validate a JSON request file.

        Args:
            file_path: Path to the JSON document.

        Returns:
            Validated request.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ParseError: If the file is not a readable UTF-8 JSON document.
            RequestValidationError: If the document violates the schema.
        """
        if not file_path.exists():
            raise FileNotFoundError(f"Request file not found: {file_path}")
        if not file_path.is_file():
            raise ParseError(f"Request path is not a file: {file_path}", file_path)

        try:
            with open(file_path, encoding="utf-8") as f:
                # Decimal keeps 120.5 exact instead of a binary float
                document = json.load(f, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e}", file_path) from e
        except UnicodeDecodeError as e:
            raise ParseError(f"Request file is not valid UTF-8: {e}", file_path) from e
        except OSError as e:
            raise ParseError(f"Cannot read request file: {e}", file_path) from e

        try:
            return self.parse(document)
        except RequestValidationError as e:
            e.file_path = file_path
            raise

    def parse(self, document: Any) -> ValidationRequest:
        """Validate an already-decoded request document.

        Args:
            document: Decoded JSON value.

        Returns:
            Validated request.

        Raises:
            RequestValidationError: If the document violates the schema.
        """
        errors: list[str] = []

        if not isinstance(document, dict):
            raise RequestValidationError(["request body must be an object"])

        raw_movements = document.get("movements")
        raw_balances = document.get("balances")

        if raw_balances is None:
            errors.append("balances must be provided")
            raw_balances = []
        elif not isinstance(raw_balances, list):
            errors.append("balances must be an array")
            raw_balances = []

        if raw_movements is None:
            if raw_balances and self.config.validation.require_movements_with_balances:
                errors.append("Movements must be provided when balances are present")
            raw_movements = []
        elif not isinstance(raw_movements, list):
            errors.append("movements must be an array")
            raw_movements = []

        movements: list[RawMovement] = []
        for index, item in enumerate(raw_movements):
            movement = self._parse_movement(item, f"movements[{index}]", errors)
            if movement is not None:
                movements.append(movement)

        balances: list[RawBalance] = []
        for index, item in enumerate(raw_balances):
            balance = self._parse_balance(item, f"balances[{index}]", errors)
            if balance is not None:
                balances.append(balance)

        if errors:
            logger.warning(f"Rejected request with {len(errors)} schema error(s)")
            raise RequestValidationError(errors)

        logger.info(
            f"Parsed request with {len(movements)} movements "
            f"and {len(balances)} balances"
        )
        return ValidationRequest(movements=tuple(movements), balances=tuple(balances))

    def _parse_movement(
        self, item: Any, path: str, errors: list[str]
    ) -> Optional[RawMovement]:
        """Validate one movement entry.

        Args:
            item: Decoded movement object.
            path: Location used in error messages.
            errors: Error list (appended to).

        Returns:
            RawMovement, or None if the entry is invalid.
        """
        if not isinstance(item, dict):
            errors.append(f"{path} must be an object")
            return None

        count_before = len(errors)

        movement_id = item.get("id")
        if isinstance(movement_id, bool) or not isinstance(movement_id, int):
            errors.append(f"{path}.id must be an integer")

        label = item.get("label")
        if not isinstance(label, str):
            errors.append(f"{path}.label must be a string")

        amount = item.get("amount")
        if not is_finite_number(amount):
            errors.append(
                f"{path}.amount must be a valid finite number (not NaN or Infinity)"
            )

        raw_date = item.get("date")
        self._check_date(raw_date, f"{path}.date", errors)

        if len(errors) > count_before:
            return None

        return RawMovement(
            id=movement_id,
            date=raw_date,
            label=label,
            amount=to_decimal(amount),
        )

    def _parse_balance(
        self, item: Any, path: str, errors: list[str]
    ) -> Optional[RawBalance]:
        """Validate one balance entry.

        Args:
            item: Decoded balance object.
            path: Location used in error messages.
            errors: Error list (appended to).

        Returns:
            RawBalance, or None if the entry is invalid.
        """
        if not isinstance(item, dict):
            errors.append(f"{path} must be an object")
            return None

        count_before = len(errors)

        balance = item.get("balance")
        if not is_finite_number(balance):
            errors.append(
                f"{path}.balance must be a valid finite number (not NaN or Infinity)"
            )

        raw_date = item.get("date")
        self._check_date(raw_date, f"{path}.date", errors)

        if len(errors) > count_before:
            return None

        return RawBalance(date=raw_date, balance=to_decimal(balance))

    def _check_date(self, raw_date: Any, path: str, errors: list[str]) -> None:
        """Validate a date string against format and range rules.

        Args:
            raw_date: Value to check.
            path: Location used in error messages.
            errors: Error list (appended to).
        """
        if not is_iso_date(raw_date):
            errors.append(f"{path} must be a valid date in YYYY-MM-DD format")
            return

        parsed = parse_iso_date(raw_date)
        validation = self.config.validation

        if parsed > latest_allowed_date(validation.future_date_grace_days, self.today):
            errors.append(f"{path} cannot be in the future")
        elif parsed < earliest_allowed_date(validation.max_date_age_years, self.today):
            errors.append(
                f"{path} cannot be older than {validation.max_date_age_years} years"
            )


def parse_request(document: Any, config: Optional[Config] = None) -> ValidationRequest:
    """Convenience function to validate a decoded request document.

    Args:
        document: Decoded JSON value.
        config: Application configuration.

    Returns:
        Validated request.
    """
    return RequestParser(config).parse(document)


def load_request(file_path: Path, config: Optional[Config] = None) -> ValidationRequest:
    """Convenience function to read and validate a request file.

    Args:
        file_path: Path to the JSON document.
        config: Application configuration.

    Returns:
        Validated request.
    """
    return RequestParser(config).parse_file(file_path)
