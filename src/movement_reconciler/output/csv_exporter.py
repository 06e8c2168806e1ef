"""CSV exporter for validation findings."""

import csv
from pathlib import Path

from movement_reconciler.models.finding import DuplicateRecord, FindingKind, Verdict
from movement_reconciler.utils.date_utils import date_to_iso
from movement_reconciler.utils.logging_config import get_logger
from movement_reconciler.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)

FINDINGS_FILENAME = "findings.csv"
DUPLICATES_FILENAME = "duplicates.csv"

FINDINGS_HEADER = [
    "Type",
    "Message",
    "Balance Date",
    "Expected Balance",
    "Actual Balance",
    "Difference",
    "Period Start",
    "Period End",
    "Missing Amount",
    "Duplicate Count",
]

DUPLICATES_HEADER = ["Movement ID", "Date", "Amount", "Label", "Duplicate Type"]


def _cell(value: object) -> str:
    """Format a detail value for a CSV cell."""
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return date_to_iso(value)  # type: ignore[arg-type]
    return str(value)


class CSVExporter:
    """Exports findings to CSV files for spreadsheet review.

    Creates in the output directory:
    - findings.csv (one row per finding)
    - duplicates.csv (one row per duplicate movement, only when any exist)
    """

    def export(self, directory: Path, verdict: Verdict) -> list[Path]:
        """Export a verdict's findings.

        Args:
            directory: Output directory (created if missing).
            verdict: Verdict to export.

        Returns:
            Paths of the files written.
        """
        directory.mkdir(parents=True, exist_ok=True)
        written = [self._write_findings(directory / FINDINGS_FILENAME, verdict)]

        duplicates: list[DuplicateRecord] = []
        for finding in verdict.findings_of(FindingKind.DUPLICATE_TRANSACTION):
            duplicates.extend(finding.details.get("duplicateMovements", []))
        if duplicates:
            written.append(
                self._write_duplicates(directory / DUPLICATES_FILENAME, duplicates)
            )

        logger.info(f"Exported {len(written)} CSV file(s) to {directory}")
        return written

    def _write_findings(self, path: Path, verdict: Verdict) -> Path:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(FINDINGS_HEADER)
            for finding in verdict.findings:
                details = finding.details
                duplicates = details.get("duplicateMovements")
                writer.writerow([
                    finding.kind.value,
                    sanitize_for_csv(finding.message),
                    _cell(details.get("balanceDate")),
                    _cell(details.get("expectedBalance")),
                    _cell(details.get("actualBalance")),
                    _cell(details.get("difference")),
                    _cell(details.get("periodStart")),
                    _cell(details.get("periodEnd")),
                    _cell(details.get("missingAmount")),
                    len(duplicates) if duplicates is not None else "",
                ])
        return path

    def _write_duplicates(self, path: Path, duplicates: list[DuplicateRecord]) -> Path:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(DUPLICATES_HEADER)
            for record in duplicates:
                writer.writerow([
                    record.movement_id,
                    date_to_iso(record.date),
                    str(record.amount),
                    sanitize_for_csv(record.label),
                    record.duplicate_type.value,
                ])
        return path
