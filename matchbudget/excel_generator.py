"""
MatchBudget - Excel Report Generation Module.

This module writes proration runs to Excel workbooks: a Proration
Summary sheet with the query and its total, and a Monthly Breakdown
sheet with one row per overlapping budget.

Classes:
    ExcelReporter: Generates Excel workbooks from proration snapshots.
"""

from datetime import datetime
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from matchbudget.schema import ProrationSnapshot


class ExcelReporter:
    """
    Generates Excel reports for budget proration.

    Attributes:
        AMOUNT_FORMAT: Excel number format for amounts.
        DAILY_FORMAT: Excel number format for daily amounts.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(snapshot, "proration_report.xlsx")
    """

    AMOUNT_FORMAT = "#,##0.00"
    DAILY_FORMAT = "#,##0.0000"

    SUMMARY_SHEET = "Proration Summary"
    BREAKDOWN_SHEET = "Monthly Breakdown"

    # Negative budgets are highlighted
    NEGATIVE_FILL = PatternFill(
        start_color="FFC7CE",
        end_color="FFC7CE",
        fill_type="solid"
    )

    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="2F5496",
        end_color="2F5496",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    def generate_report(
        self,
        snapshot: ProrationSnapshot,
        output_path: Union[str, Path]
    ) -> None:
        """
        Generates a complete Excel report from a proration run.

        Args:
            snapshot: Proration snapshot to report.
            output_path: Path for the output .xlsx file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        workbook.remove(workbook.active)

        self._create_summary_sheet(workbook, snapshot)
        self._create_breakdown_sheet(workbook, snapshot)

        workbook.save(output_path)

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        snapshot: ProrationSnapshot
    ) -> None:
        ws = workbook.create_sheet(self.SUMMARY_SHEET)

        ws["A1"] = "MatchBudget - Proration Summary"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:D1")

        ws["A3"] = "Report Generated:"
        ws["B3"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A4"] = "Query Run:"
        ws["B4"] = snapshot.timestamp.strftime("%Y-%m-%d %H:%M")
        ws["A5"] = "Version:"
        ws["B5"] = snapshot.version

        ws["A7"] = "QUERY"
        ws["A7"].font = Font(bold=True, size=14)
        ws.merge_cells("A7:D7")

        rows = [
            ("Start Date", snapshot.period.start.isoformat()),
            ("End Date", snapshot.period.end.isoformat()),
            ("Days in Period", snapshot.period.days),
            ("Budgets Overlapping", len(snapshot.allocations)),
            ("Total Prorated Amount", float(snapshot.total_amount)),
        ]

        for row, (label, value) in enumerate(rows, start=9):
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = value

        ws["B13"].number_format = self.AMOUNT_FORMAT

        self._auto_adjust_columns(ws)

    def _create_breakdown_sheet(
        self,
        workbook: Workbook,
        snapshot: ProrationSnapshot
    ) -> None:
        ws = workbook.create_sheet(self.BREAKDOWN_SHEET)

        headers = [
            "YearMonth",
            "Monthly Amount",
            "Days in Month",
            "Daily Amount",
            "Overlapping Days",
            "Prorated Amount",
        ]

        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        for row_idx, allocation in enumerate(snapshot.allocations, start=2):
            budget = allocation.budget
            row_data = [
                budget.year_month,
                budget.amount,
                budget.days_in_month,
                float(allocation.daily_amount),
                allocation.overlapping_days,
                float(allocation.amount),
            ]

            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER

                if col_idx in (2, 6):
                    cell.number_format = self.AMOUNT_FORMAT
                elif col_idx == 4:
                    cell.number_format = self.DAILY_FORMAT

            if budget.amount < 0:
                for col_idx in range(1, len(headers) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = self.NEGATIVE_FILL

        total_row = len(snapshot.allocations) + 2
        ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
        total_cell = ws.cell(row=total_row, column=6, value=float(snapshot.total_amount))
        total_cell.font = Font(bold=True)
        total_cell.number_format = self.AMOUNT_FORMAT

        self._auto_adjust_columns(ws)

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            # Padding plus a minimum width
            worksheet.column_dimensions[get_column_letter(col_idx)].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "proration_report") -> str:
        """Generates a timestamped filename like "proration_report_2025-08-14_143052.xlsx"."""
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
