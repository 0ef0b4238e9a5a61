"""
MatchBudget - Data Validation Module.

This module provides CSV validation and parsing for monthly budget data.
Each row becomes a Budget; bad rows are reported with their row number
instead of aborting the whole file.

Classes:
    RowError: A single row-level validation failure.
    ValidationResult: Container for validation outcomes.
    DataValidator: Main validation class for CSV processing.
"""

import csv
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from matchbudget.schema import Budget, ValidationError


@dataclass
class RowError:
    """
    Represents a single validation error with context.

    Attributes:
        row_number: The 1-based row number in the CSV.
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A user-facing error message.
    """

    row_number: int
    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        return f"Error: Row {self.row_number} '{self.field_name}' - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for CSV validation results.

    Attributes:
        budgets: Successfully validated Budget objects, in file order.
        errors: RowError objects for failed rows.
        total_rows: Total number of data rows processed.
    """

    budgets: List[Budget] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def valid_count(self) -> int:
        return len(self.budgets)

    @property
    def error_count(self) -> int:
        return len(self.errors)


class DataValidator:
    """
    Validates CSV input and converts it to Budget objects.

    Amounts must be whole numbers. Thousands separators and surrounding
    spaces are tolerated; decimals are rejected. A month may appear only
    once per file.

    Example:
        >>> validator = DataValidator()
        >>> result = validator.validate_csv("budgets.csv")
        >>> if result.is_valid:
        ...     total = sum(b.amount for b in result.budgets)
    """

    REQUIRED_COLUMNS = ["YearMonth", "Amount"]

    # Thousands separators and whitespace
    AMOUNT_CLEAN_PATTERN = re.compile(r"[\s,]")
    INTEGER_PATTERN = re.compile(r"^-?\d+$")

    def validate_csv(
        self,
        file_path: Union[str, Path],
        has_header: bool = True
    ) -> ValidationResult:
        """
        Validates a CSV file of monthly budgets.

        Args:
            file_path: Path to the CSV file.
            has_header: Whether the CSV has a header row. Without one the
                first two columns are YearMonth and Amount.

        Returns:
            ValidationResult with budgets list and any errors.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If required columns are missing.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
            if has_header:
                reader = csv.DictReader(csvfile)
                missing = self._check_required_columns(reader.fieldnames or [])
                if missing:
                    raise ValueError(
                        f"Missing required columns: {', '.join(missing)}"
                    )
                rows = [self._normalise_keys(row) for row in reader]
                return self.validate_rows(rows, start_row=2)

            result = ValidationResult()
            seen: Set[str] = set()
            for row_num, row in enumerate(csv.reader(csvfile), start=1):
                result.total_rows += 1
                if len(row) < 2:
                    result.errors.append(RowError(
                        row_number=row_num,
                        field_name="Row",
                        value=str(row),
                        message="Row must have at least 2 columns: YearMonth, Amount"
                    ))
                    continue

                row_dict = {"YearMonth": row[0], "Amount": row[1]}
                self._collect(result, row_dict, row_num, seen)

        return result

    def validate_rows(
        self,
        rows: List[dict],
        start_row: int = 2
    ) -> ValidationResult:
        """
        Validates a list of row dictionaries.

        Args:
            rows: Dictionaries with "YearMonth" and "Amount" keys.
            start_row: Starting row number for error reporting.

        Returns:
            ValidationResult with budgets list and any errors.
        """
        result = ValidationResult(total_rows=len(rows))
        seen: Set[str] = set()

        for idx, row in enumerate(rows):
            self._collect(result, row, start_row + idx, seen)

        return result

    def _collect(
        self,
        result: ValidationResult,
        row: dict,
        row_number: int,
        seen: Set[str]
    ) -> None:
        budget, errors = self._validate_row(row, row_number)
        if budget is not None and budget.year_month in seen:
            errors.append(RowError(
                row_number=row_number,
                field_name="YearMonth",
                value=budget.year_month,
                message=f"Budget for YearMonth {budget.year_month} already exists"
            ))
            budget = None

        if budget is not None:
            seen.add(budget.year_month)
            result.budgets.append(budget)
        result.errors.extend(errors)

    def _check_required_columns(self, columns: List[str]) -> List[str]:
        columns_lower = [c.lower().strip() for c in columns if c]
        return [
            required for required in self.REQUIRED_COLUMNS
            if required.lower() not in columns_lower
        ]

    def _normalise_keys(self, row: dict) -> dict:
        """Maps header spellings like ' yearmonth ' onto canonical names."""
        canonical = {c.lower(): c for c in self.REQUIRED_COLUMNS}
        normalised = {}
        for key, value in row.items():
            if key is None:
                continue
            name = canonical.get(key.lower().strip(), key)
            normalised[name] = value
        return normalised

    def _validate_row(
        self,
        row: dict,
        row_number: int
    ) -> Tuple[Optional[Budget], List[RowError]]:
        """
        Validates a single row and converts it to a Budget.

        Args:
            row: Dictionary with row data.
            row_number: Row number for error reporting.

        Returns:
            Tuple of (Budget or None, list of errors).
        """
        errors: List[RowError] = []

        year_month = (row.get("YearMonth") or "").strip()
        if not year_month:
            errors.append(RowError(
                row_number=row_number,
                field_name="YearMonth",
                value=year_month,
                message="YearMonth cannot be empty"
            ))

        amount, amount_error = self._parse_amount(row.get("Amount"), row_number)
        if amount_error:
            errors.append(amount_error)

        if errors:
            return None, errors

        try:
            budget = Budget(year_month=year_month, amount=amount)
        except ValidationError as exc:
            return None, [RowError(
                row_number=row_number,
                field_name="YearMonth",
                value=year_month,
                message=str(exc)
            )]

        return budget, errors

    def _parse_amount(
        self,
        value: Optional[str],
        row_number: int
    ) -> Tuple[Optional[int], Optional[RowError]]:
        """
        Parses a whole-number amount.

        Handles "20000", "20,000", " -500 ".

        Returns:
            Tuple of (int value or None, RowError or None).
        """
        original_value = value or ""
        cleaned = self.AMOUNT_CLEAN_PATTERN.sub("", original_value)

        if not cleaned:
            return None, RowError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message="Amount cannot be empty"
            )

        if not self.INTEGER_PATTERN.match(cleaned):
            return None, RowError(
                row_number=row_number,
                field_name="Amount",
                value=original_value,
                message=f"Amount must be an integer (received: '{original_value}')"
            )

        return int(cleaned), None
