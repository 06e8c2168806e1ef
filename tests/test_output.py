"""Tests for JSON and CSV output."""

import csv
import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from movement_reconciler.config import Config
from movement_reconciler.models.finding import (
    DuplicateRecord,
    DuplicateType,
    FindingKind,
    ValidationFinding,
    Verdict,
)
from movement_reconciler.output import CSVExporter, JSONWriter, json_default
from movement_reconciler.output.csv_exporter import (
    DUPLICATES_FILENAME,
    DUPLICATES_HEADER,
    FINDINGS_FILENAME,
    FINDINGS_HEADER,
)


def make_rejected_verdict() -> Verdict:
    """Create a verdict with a duplicate and a balance mismatch."""
    duplicates = [
        DuplicateRecord(
            movement_id=movement_id,
            date=date(2024, 2, 10),
            amount=Decimal("-70.5"),
            label=label,
            duplicate_type=DuplicateType.EXACT,
        )
        for movement_id, label in [(2, "GROCERY STORE"), (4, "=HYPERLINK(evil)")]
    ]
    return Verdict(
        findings=(
            ValidationFinding(
                kind=FindingKind.DUPLICATE_TRANSACTION,
                message="Found 2 duplicate transaction(s)",
                details={"duplicateMovements": duplicates},
            ),
            ValidationFinding(
                kind=FindingKind.BALANCE_MISMATCH,
                message="Balance mismatch at control point 2024-02-29T00:00:00.000Z",
                details={
                    "balanceDate": date(2024, 2, 29),
                    "expectedBalance": Decimal("1859"),
                    "actualBalance": Decimal("1929.5"),
                    "difference": Decimal("-70.5"),
                },
            ),
        )
    )


class TestJsonDefault:
    """Tests for json_default."""

    def test_decimals_become_numbers(self) -> None:
        """Test that Decimals encode as int or float."""
        text = json.dumps(
            {"whole": Decimal("3000.00"), "cents": Decimal("-70.5")}, default=json_default
        )

        assert json.loads(text) == {"whole": 3000, "cents": -70.5}

    def test_other_types_rejected(self) -> None:
        """Test that unknown types still fail to serialize."""
        with pytest.raises(TypeError):
            json.dumps({"when": date(2024, 1, 1)}, default=json_default)


class TestJSONWriter:
    """Tests for JSONWriter."""

    def test_accepted(self) -> None:
        """Test the accepted document."""
        assert json.loads(JSONWriter().render(Verdict())) == {"message": "Accepted"}

    def test_rejected_numbers(self) -> None:
        """Test that decimals render as plain JSON numbers."""
        document = json.loads(JSONWriter().render(make_rejected_verdict()))

        details = document["reasons"][1]["details"]
        assert details["expectedBalance"] == 1859
        assert details["actualBalance"] == 1929.5
        assert details["balanceDate"] == "2024-02-29T00:00:00.000Z"

    def test_group_reasons_from_config(self) -> None:
        """Test that config.validation.group_reasons selects the grouped form."""
        config = Config()
        config.validation.group_reasons = True

        document = json.loads(JSONWriter(config).render(make_rejected_verdict()))

        assert [r["type"] for r in document["reasons"]] == [
            "DUPLICATE_TRANSACTION",
            "BALANCE_MISMATCH",
        ]
        assert "errors" in document["reasons"][0]

    def test_explicit_grouping_overrides_config(self) -> None:
        """Test that the group_by_kind argument wins over config."""
        config = Config()
        config.validation.group_reasons = True

        document = json.loads(
            JSONWriter(config).render(make_rejected_verdict(), group_by_kind=False)
        )

        assert "errors" not in document["reasons"][0]

    def test_compact_when_indent_zero(self) -> None:
        """Test that indent 0 writes a single line."""
        config = Config()
        config.output.indent = 0

        assert "\n" not in JSONWriter(config).render(make_rejected_verdict())

    def test_write_creates_directories(self, tmp_path: Path) -> None:
        """Test that write creates missing parent directories."""
        path = tmp_path / "nested" / "verdict.json"

        JSONWriter().write(path, make_rejected_verdict())

        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text)["message"] == "Validation failed"


class TestCSVExporter:
    """Tests for CSVExporter."""

    def test_exports_findings_and_duplicates(self, tmp_path: Path) -> None:
        """Test that both files are written with one row per item."""
        paths = CSVExporter().export(tmp_path, make_rejected_verdict())

        assert [p.name for p in paths] == [FINDINGS_FILENAME, DUPLICATES_FILENAME]

        with open(tmp_path / FINDINGS_FILENAME, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == FINDINGS_HEADER
        assert rows[1][0] == "DUPLICATE_TRANSACTION"
        assert rows[1][-1] == "2"
        assert rows[2][:6] == [
            "BALANCE_MISMATCH",
            "Balance mismatch at control point 2024-02-29T00:00:00.000Z",
            "2024-02-29",
            "1859",
            "1929.5",
            "-70.5",
        ]

    def test_duplicate_labels_sanitized(self, tmp_path: Path) -> None:
        """Test that formula-like labels cannot execute in a spreadsheet."""
        CSVExporter().export(tmp_path, make_rejected_verdict())

        with open(tmp_path / DUPLICATES_FILENAME, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == DUPLICATES_HEADER
        assert rows[1] == ["2", "2024-02-10", "-70.5", "GROCERY STORE", "exact"]
        assert rows[2][3].startswith("'")

    def test_no_duplicates_file_when_none(self, tmp_path: Path) -> None:
        """Test that duplicates.csv is only written when needed."""
        paths = CSVExporter().export(tmp_path / "out", Verdict())

        assert [p.name for p in paths] == [FINDINGS_FILENAME]
        assert not (tmp_path / "out" / DUPLICATES_FILENAME).exists()
