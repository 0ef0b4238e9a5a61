"""
MatchBudget - Data Validator Tests.

Property-based and unit tests for DataValidator class.
Tests ensure correct CSV parsing, integer amount conversion and error
reporting with row numbers.
"""

import csv
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis.strategies import composite, integers, lists, sampled_from

from matchbudget.schema import Budget
from matchbudget.validator import DataValidator, RowError, ValidationResult


@composite
def valid_budget_rows(draw):
    """Generate rows for distinct months with amounts in various formats."""
    months = draw(lists(integers(min_value=1, max_value=12), unique=True, min_size=1))
    rows = []
    for month in months:
        amount = draw(integers(min_value=-1_000_000, max_value=1_000_000))
        formats = [str(amount), f"{amount:,}", f" {amount} "]
        rows.append({
            "YearMonth": f"2025{month:02d}",
            "Amount": draw(sampled_from(formats)),
            "expected": Budget(f"2025{month:02d}", amount),
        })
    return rows


def write_csv(directory: str, rows, header=("YearMonth", "Amount")) -> Path:
    """Writes rows to a CSV file and returns its path."""
    path = Path(directory) / "budgets.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        if header:
            writer.writerow(header)
        writer.writerows(rows)
    return path


class TestDataValidatorUnit:
    """Unit tests for DataValidator edge cases."""

    def setup_method(self) -> None:
        """Initialise DataValidator for each test."""
        self.validator = DataValidator()

    def test_valid_csv(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(tmpdir, [("202507", "3100"), ("202508", "310")])

            result = self.validator.validate_csv(path)

        assert result.is_valid
        assert result.total_rows == 2
        assert result.budgets == [Budget("202507", 3100), Budget("202508", 310)]

    def test_header_case_and_spacing_tolerated(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(tmpdir, [("202507", "3100")], header=(" yearmonth ", "AMOUNT"))

            result = self.validator.validate_csv(path)

        assert result.budgets == [Budget("202507", 3100)]

    def test_csv_without_header(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(tmpdir, [("202507", "3100"), ("202508",)], header=None)

            result = self.validator.validate_csv(path, has_header=False)

        assert result.valid_count == 1
        assert result.error_count == 1
        assert result.errors[0].row_number == 2
        assert result.errors[0].field_name == "Row"

    def test_missing_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            self.validator.validate_csv("/nonexistent/budgets.csv")

    def test_missing_columns_raise(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(tmpdir, [("202507",)], header=("YearMonth",))

            with pytest.raises(ValueError, match="Missing required columns: Amount"):
                self.validator.validate_csv(path)

    @pytest.mark.parametrize("amount", ["", "   ", "100.50", "abc", "1e3", "R100"])
    def test_invalid_amounts_rejected(self, amount: str) -> None:
        result = self.validator.validate_rows([{"YearMonth": "202507", "Amount": amount}])

        assert not result.is_valid
        assert result.errors[0].field_name == "Amount"
        assert result.errors[0].row_number == 2

    @pytest.mark.parametrize("year_month", ["2025-07", "202513", "20257"])
    def test_invalid_year_month_rejected(self, year_month: str) -> None:
        result = self.validator.validate_rows([{"YearMonth": year_month, "Amount": "100"}])

        assert not result.is_valid
        assert result.errors[0].field_name == "YearMonth"
        assert "YYYYMM" in result.errors[0].message

    def test_empty_year_month_rejected(self) -> None:
        result = self.validator.validate_rows([{"YearMonth": " ", "Amount": "100"}])
        assert result.errors[0].message == "YearMonth cannot be empty"

    def test_duplicate_month_is_row_error(self) -> None:
        rows = [
            {"YearMonth": "202507", "Amount": "100"},
            {"YearMonth": "202507", "Amount": "200"},
        ]

        result = self.validator.validate_rows(rows)

        assert result.budgets == [Budget("202507", 100)]
        assert result.errors[0].row_number == 3
        assert "already exists" in result.errors[0].message

    def test_negative_and_zero_amounts_accepted(self) -> None:
        rows = [
            {"YearMonth": "202507", "Amount": "-500"},
            {"YearMonth": "202508", "Amount": "0"},
        ]

        result = self.validator.validate_rows(rows)

        assert [b.amount for b in result.budgets] == [-500, 0]

    def test_row_error_str(self) -> None:
        error = RowError(row_number=4, field_name="Amount", value="x", message="bad")
        assert str(error) == "Error: Row 4 'Amount' - bad"

    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert result.valid_count == 0


class TestDataValidatorProperty:
    """Property-based tests for DataValidator."""

    def setup_method(self) -> None:
        self.validator = DataValidator()

    @given(valid_budget_rows())
    @settings(max_examples=100)
    def test_valid_rows_all_preserved(self, rows) -> None:
        """Property: every valid row becomes a Budget, in order."""
        result = self.validator.validate_rows(
            [{"YearMonth": r["YearMonth"], "Amount": r["Amount"]} for r in rows]
        )

        assert result.is_valid
        assert result.budgets == [r["expected"] for r in rows]
