"""Excel workbook writer for ledger reports."""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from training_ledger.config import Config
from training_ledger.models.report import (
    FinancialSummary,
    TrainingBreakdown,
    WithholdingPayment,
    WorkloadLevel,
)
from training_ledger.utils.logging_config import LogContext, get_logger
from training_ledger.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)


class ExcelWriter:
    """Writes ledger reports to a multi-sheet Excel workbook.

    Generates sheets:
    - Summary
    - Monthly
    - By Training
    - Adjustments
    - Withholding
    """

    def __init__(self, config: Config):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.reporting = config.reporting

        # Style definitions
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        self.high_fill = PatternFill(start_color="F8CBAD", end_color="F8CBAD", fill_type="solid")
        self.low_fill = PatternFill(start_color="C6E0B4", end_color="C6E0B4", fill_type="solid")
        self.right_aligned = Alignment(horizontal="right")

    def write(
        self,
        output_path: Path,
        summary: FinancialSummary,
        breakdown: list[TrainingBreakdown],
        withholding: list[WithholdingPayment],
    ) -> None:
        """Write all reports to an Excel workbook.

        Args:
            output_path: Path for output file.
            summary: Summary of the selected period.
            breakdown: Per-training rows.
            withholding: Withholding payment schedule.
        """
        with LogContext(logger, "excel export", output_path=output_path):
            wb = Workbook()
            # Remove default sheet
            if wb.active:
                wb.remove(wb.active)

            self._create_summary(wb, summary)
            self._create_monthly(wb, summary)
            self._create_breakdown(wb, breakdown)
            self._create_adjustments(wb, summary)
            self._create_withholding(wb, withholding)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)

        logger.info(f"Excel workbook saved: {output_path}")

    def _write_headers(self, ws, headers: list[str], row: int = 1) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill

    def _money_cell(self, ws, row: int, column: int, value) -> None:
        cell = ws.cell(row=row, column=column, value=float(value))
        cell.number_format = self._money_format()

    def _create_summary(self, wb: Workbook, summary: FinancialSummary) -> None:
        ws = wb.create_sheet("Summary")

        ws.cell(row=1, column=1, value="REPORT SUMMARY")
        ws.cell(row=1, column=1).font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value="Period")
        ws.cell(row=2, column=2, value=summary.date_range.display)

        ws.cell(row=4, column=1, value="Hours")
        ws.cell(row=4, column=2, value=summary.hours)
        ws.cell(row=5, column=1, value="Sessions")
        ws.cell(row=5, column=2, value=summary.session_count)

        money_rows = [
            ("Training Income", summary.training_income),
            ("Extras", summary.extras_total),
            ("Adjustments", summary.adjustments_total),
            ("Gross", summary.gross),
            (f"Tax ({summary.tax_rate_percent}%)", summary.tax),
            ("Net", summary.net),
        ]
        for row, (label, amount) in enumerate(money_rows, 6):
            ws.cell(row=row, column=1, value=label)
            self._money_cell(ws, row, 2, amount)
        ws.cell(row=6 + len(money_rows) - 1, column=1).font = Font(bold=True)

        ws.column_dimensions["A"].width = 20
        ws.column_dimensions["B"].width = 28

    def _create_monthly(self, wb: Workbook, summary: FinancialSummary) -> None:
        """Create Monthly sheet; high and low workload months are shaded."""
        ws = wb.create_sheet("Monthly")
        self._write_headers(
            ws, ["Month", "Hours", "Sessions", "Training Income", "Extras", "Revenue", "Workload"]
        )

        for row, bucket in enumerate(summary.months, 2):
            ws.cell(row=row, column=1, value=f"{bucket.year:04d}-{bucket.month:02d}")
            ws.cell(row=row, column=2, value=bucket.hours)
            ws.cell(row=row, column=3, value=bucket.session_count)
            self._money_cell(ws, row, 4, bucket.training_income)
            self._money_cell(ws, row, 5, bucket.extras)
            self._money_cell(ws, row, 6, bucket.revenue)

            level = summary.workload_level(bucket)
            level_cell = ws.cell(row=row, column=7, value=level.value)
            if level is WorkloadLevel.HIGH:
                level_cell.fill = self.high_fill
            elif level is WorkloadLevel.LOW:
                level_cell.fill = self.low_fill

        for i in range(7):
            ws.column_dimensions[get_column_letter(i + 1)].width = 15
        ws.freeze_panes = "A2"

    def _create_breakdown(self, wb: Workbook, breakdown: list[TrainingBreakdown]) -> None:
        ws = wb.create_sheet("By Training")
        self._write_headers(
            ws, ["Training", "Hourly Rate", "Hours", "Sessions", "Session Income", "Extras", "Revenue"]
        )

        for row, item in enumerate(breakdown, 2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(item.name))
            self._money_cell(ws, row, 2, item.hourly_rate)
            ws.cell(row=row, column=3, value=item.hours)
            ws.cell(row=row, column=4, value=item.session_count)
            self._money_cell(ws, row, 5, item.session_income)
            self._money_cell(ws, row, 6, item.extras)
            self._money_cell(ws, row, 7, item.revenue)

        # Total row sums the revenue column
        if breakdown:
            total_row = len(breakdown) + 2
            ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
            cell = ws.cell(row=total_row, column=7, value=f"=SUM(G2:G{total_row - 1})")
            cell.number_format = self._money_format()
            cell.font = Font(bold=True)

        ws.column_dimensions["A"].width = 45
        for i in range(1, 7):
            ws.column_dimensions[get_column_letter(i + 1)].width = 14
        ws.freeze_panes = "B2"

    def _create_adjustments(self, wb: Workbook, summary: FinancialSummary) -> None:
        ws = wb.create_sheet("Adjustments")
        self._write_headers(ws, ["Date", "Description", "Value"])

        if not summary.adjustments:
            ws.cell(row=2, column=1, value="No adjustments in period")
            return

        for row, adjustment in enumerate(sorted(summary.adjustments, key=lambda a: a.date), 2):
            ws.cell(row=row, column=1, value=adjustment.date)
            ws.cell(row=row, column=2, value=sanitize_for_csv(adjustment.description))
            self._money_cell(ws, row, 3, adjustment.value)

        ws.column_dimensions["A"].width = 12
        ws.column_dimensions["B"].width = 40
        ws.column_dimensions["C"].width = 14

    def _create_withholding(self, wb: Workbook, payments: list[WithholdingPayment]) -> None:
        ws = wb.create_sheet("Withholding")
        self._write_headers(ws, ["Period", "Due Date", "Revenue", "Rate", "Withholding"])

        for row, payment in enumerate(payments, 2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(payment.label))
            ws.cell(row=row, column=2, value=payment.due_date)
            self._money_cell(ws, row, 3, payment.revenue)
            rate_cell = ws.cell(row=row, column=4, value=f"{payment.tax_rate_percent}%")
            rate_cell.alignment = self.right_aligned
            self._money_cell(ws, row, 5, payment.tax)

        for i in range(5):
            ws.column_dimensions[get_column_letter(i + 1)].width = 14

    def _money_format(self) -> str:
        """Get number format for money values.

        Returns:
            Excel number format string.
        """
        symbol = self.reporting.currency_symbol
        return f'#,##0.00 "{symbol}";[Red]-#,##0.00 "{symbol}"'
