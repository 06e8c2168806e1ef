"""Output generation for JSON verdicts and CSV findings."""

from movement_reconciler.output.csv_exporter import CSVExporter
from movement_reconciler.output.json_writer import JSONWriter, json_default

__all__ = ["JSONWriter", "CSVExporter", "json_default"]
