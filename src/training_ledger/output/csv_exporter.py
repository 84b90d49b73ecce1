"""CSV exporter for spreadsheet import."""

import csv
from decimal import Decimal
from pathlib import Path

from training_ledger.config import Config
from training_ledger.models.report import FinancialSummary, TrainingBreakdown, WithholdingPayment
from training_ledger.utils.date_utils import date_to_iso
from training_ledger.utils.logging_config import LogContext, get_logger
from training_ledger.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)


class CSVExporter:
    """Exports ledger reports to CSV files.

    Creates one file per report in the output directory:
    - summary.csv
    - monthly.csv
    - by_training.csv
    - adjustments.csv
    - withholding.csv
    """

    def __init__(self, config: Config):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.reporting = config.reporting

    def export(
        self,
        output_dir: Path,
        summary: FinancialSummary,
        breakdown: list[TrainingBreakdown],
        withholding: list[WithholdingPayment],
    ) -> list[Path]:
        """Export all reports to CSV files.

        Args:
            output_dir: Directory receiving the files (created if needed).
            summary: Summary of the selected period.
            breakdown: Per-training rows.
            withholding: Withholding payment schedule.

        Returns:
            List of paths to created CSV files.
        """
        with LogContext(logger, "csv export", output_dir=output_dir):
            output_dir.mkdir(parents=True, exist_ok=True)
            created_files = [
                self._export_summary(output_dir, summary),
                self._export_monthly(output_dir, summary),
                self._export_breakdown(output_dir, breakdown),
                self._export_adjustments(output_dir, summary),
                self._export_withholding(output_dir, withholding),
            ]

        logger.info(f"Exported {len(created_files)} CSV files")
        return created_files

    def _money(self, amount: Decimal) -> str:
        return f"{amount:.{self.reporting.decimal_places}f}"

    def _export_summary(self, output_dir: Path, summary: FinancialSummary) -> Path:
        output_path = output_dir / "summary.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["REPORT SUMMARY", ""])
            writer.writerow(["Period", summary.date_range.display])
            writer.writerow([])
            writer.writerow(["Hours", summary.hours])
            writer.writerow(["Sessions", summary.session_count])
            writer.writerow(["Training Income", self._money(summary.training_income)])
            writer.writerow(["Extras", self._money(summary.extras_total)])
            writer.writerow(["Adjustments", self._money(summary.adjustments_total)])
            writer.writerow(["Gross", self._money(summary.gross)])
            writer.writerow([f"Tax ({summary.tax_rate_percent}%)", self._money(summary.tax)])
            writer.writerow(["Net", self._money(summary.net)])

        logger.debug(f"Wrote {output_path}")
        return output_path

    def _export_monthly(self, output_dir: Path, summary: FinancialSummary) -> Path:
        output_path = output_dir / "monthly.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["Month", "Hours", "Sessions", "Training Income", "Extras", "Revenue", "Workload"]
            )
            for bucket in summary.months:
                writer.writerow([
                    f"{bucket.year:04d}-{bucket.month:02d}",
                    bucket.hours,
                    bucket.session_count,
                    self._money(bucket.training_income),
                    self._money(bucket.extras),
                    self._money(bucket.revenue),
                    summary.workload_level(bucket).value,
                ])

        return output_path

    def _export_breakdown(self, output_dir: Path, breakdown: list[TrainingBreakdown]) -> Path:
        output_path = output_dir / "by_training.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["Training", "Hourly Rate", "Hours", "Sessions", "Session Income", "Extras", "Revenue"]
            )
            for row in breakdown:
                writer.writerow([
                    sanitize_for_csv(row.name),
                    self._money(row.hourly_rate),
                    row.hours,
                    row.session_count,
                    self._money(row.session_income),
                    self._money(row.extras),
                    self._money(row.revenue),
                ])

        return output_path

    def _export_adjustments(self, output_dir: Path, summary: FinancialSummary) -> Path:
        output_path = output_dir / "adjustments.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Description", "Value"])
            for adjustment in sorted(summary.adjustments, key=lambda a: a.date):
                writer.writerow([
                    date_to_iso(adjustment.date),
                    sanitize_for_csv(adjustment.description),
                    self._money(adjustment.value),
                ])

        return output_path

    def _export_withholding(self, output_dir: Path, payments: list[WithholdingPayment]) -> Path:
        output_path = output_dir / "withholding.csv"

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Period", "Due Date", "Revenue", "Rate", "Withholding"])
            for payment in payments:
                writer.writerow([
                    sanitize_for_csv(payment.label),
                    date_to_iso(payment.due_date),
                    self._money(payment.revenue),
                    f"{payment.tax_rate_percent}%",
                    self._money(payment.tax),
                ])

        return output_path
