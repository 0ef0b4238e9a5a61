"""
MatchBudget - Excel Generator Tests.

Unit tests for ExcelReporter class.
Tests ensure correct sheet creation, data population
and formatting application.
"""

import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest
from openpyxl import load_workbook

from matchbudget.calculator import ProrationEngine
from matchbudget.excel_generator import ExcelReporter
from matchbudget.schema import Budget, Period, ProrationSnapshot


def create_test_snapshot() -> ProrationSnapshot:
    """Creates a snapshot with one negative budget."""
    budgets = [Budget("202507", 3100), Budget("202508", -310)]
    return ProrationEngine().build_snapshot(
        budgets,
        Period(date(2025, 7, 30), date(2025, 8, 14)),
        timestamp=datetime(2025, 8, 14, 14, 30, 0),
    )


class TestExcelReporterUnit:
    """Unit tests for ExcelReporter."""

    def setup_method(self) -> None:
        """Initialise ExcelReporter for each test."""
        self.reporter = ExcelReporter()

    @pytest.fixture
    def workbook(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "reports" / "test_report.xlsx"
            self.reporter.generate_report(create_test_snapshot(), output_path)
            assert output_path.exists()
            yield load_workbook(output_path)

    def test_creates_both_sheets(self, workbook) -> None:
        assert workbook.sheetnames == ["Proration Summary", "Monthly Breakdown"]

    def test_summary_sheet_values(self, workbook) -> None:
        ws = workbook["Proration Summary"]

        assert ws["A1"].value == "MatchBudget - Proration Summary"
        assert ws["B9"].value == "2025-07-30"
        assert ws["B10"].value == "2025-08-14"
        assert ws["B11"].value == 16
        assert ws["B12"].value == 2
        assert ws["B13"].value == pytest.approx(60.0)
        assert ws["B13"].number_format == ExcelReporter.AMOUNT_FORMAT

    def test_breakdown_rows(self, workbook) -> None:
        ws = workbook["Monthly Breakdown"]

        assert ws["A1"].value == "YearMonth"
        assert [ws.cell(row=2, column=c).value for c in range(1, 7)] == [
            "202507", 3100, 31, pytest.approx(100.0), 2, pytest.approx(200.0)
        ]
        assert ws["E3"].value == 14
        assert ws["F3"].value == pytest.approx(-140.0)
        assert ws["A4"].value == "Total"
        assert ws["F4"].value == pytest.approx(60.0)

    def test_negative_budget_highlighted(self, workbook) -> None:
        ws = workbook["Monthly Breakdown"]

        assert ws["A3"].fill.start_color.rgb.endswith("FFC7CE")
        assert not ws["A2"].fill.start_color.rgb.endswith("FFC7CE")

    def test_generate_filename(self) -> None:
        name = self.reporter.generate_filename()
        assert name.startswith("proration_report_")
        assert name.endswith(".xlsx")
