"""Report exporters for the training ledger."""

from training_ledger.output.csv_exporter import CSVExporter
from training_ledger.output.excel_writer import ExcelWriter

__all__ = ["CSVExporter", "ExcelWriter"]
