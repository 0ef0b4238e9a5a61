"""
MatchBudget - Data Schema Module.

This module defines the core data models for both engines. Budget and
Period are immutable and validated on construction, so an invalid month
or an inverted range can never reach a calculation. All prorated amounts
use the Decimal type.

Classes:
    ValidationError: Raised when a Budget field is malformed.
    InvalidRange: Raised when a Period starts after it ends.
    Event: Enumeration of match events.
    MatchScore: Decoded score of a match result string.
    MatchStatistics: Detailed statistics of a match result string.
    Period: Closed date interval with day granularity.
    Budget: Monthly budget amount for a YYYYMM month.
    BudgetAllocation: Prorated share of one budget within a period.
    ProrationSnapshot: Complete proration run with metadata.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List

from matchbudget.date_logic import split_year_month


# Match result alphabet
HOME_GOAL_TAG = "H"
AWAY_GOAL_TAG = "A"
HALF_MARKER = ";"


class ValidationError(ValueError):
    """Raised when a Budget is built from a malformed YearMonth or Amount."""


class InvalidRange(ValueError):
    """Raised when a period or query range starts after it ends."""


class Event(Enum):
    """
    Events that can be applied to a match result.

    Attributes:
        HOME_GOAL: Home team scored.
        AWAY_GOAL: Away team scored.
        CANCEL_HOME_GOAL: A home goal was disallowed.
        CANCEL_AWAY_GOAL: An away goal was disallowed.
        NEXT_PERIOD: The match moved on to the second half.
    """

    HOME_GOAL = 1
    AWAY_GOAL = 2
    CANCEL_HOME_GOAL = 3
    CANCEL_AWAY_GOAL = 4
    NEXT_PERIOD = 5


@dataclass(frozen=True)
class MatchScore:
    """
    Score decoded from a match result string.

    Attributes:
        home_goals: Number of home goal tags.
        away_goals: Number of away goal tags.
        is_second_half: True once a half marker has been recorded.
    """

    home_goals: int = 0
    away_goals: int = 0
    is_second_half: bool = False

    @property
    def half_label(self) -> str:
        return "Second Half" if self.is_second_half else "First Half"

    def __str__(self) -> str:
        return f"{self.home_goals}:{self.away_goals} ({self.half_label})"


@dataclass(frozen=True)
class MatchStatistics:
    home_goals: int
    away_goals: int
    total_goals: int
    is_second_half: bool
    display_result: str


@dataclass(frozen=True)
class Period:
    """
    Closed date interval [start, end] with day granularity.

    Datetime values are truncated to their calendar date, so the time of
    day never affects ordering or overlap.

    Attributes:
        start: First day of the interval.
        end: Last day of the interval.

    Raises:
        InvalidRange: If start falls after end.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", self._as_date(self.start, "start"))
        object.__setattr__(self, "end", self._as_date(self.end, "end"))

        if self.start > self.end:
            raise InvalidRange(
                f"Invalid date range: start date ({self.start.isoformat()}) "
                f"must be before or equal to end date ({self.end.isoformat()})"
            )

    @staticmethod
    def _as_date(value: Any, name: str) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        raise TypeError(f"Period {name} must be a date, got {type(value).__name__}")

    @property
    def days(self) -> int:
        """Number of calendar days in the period, inclusive."""
        return (self.end - self.start).days + 1

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class Budget:
    """
    Budget amount for one calendar month.

    The effective range of a budget is the whole month named by its
    year_month. Instances are immutable; use dataclasses.replace() to
    derive a changed copy, which re-runs validation.

    Attributes:
        year_month: Six-digit month identifier, e.g. "202508".
        amount: Whole amount for the month. May be zero or negative.

    Raises:
        ValidationError: If year_month is not a valid YYYYMM month or
            amount is not an integer.
    """

    year_month: str
    amount: int

    def __post_init__(self) -> None:
        try:
            split_year_month(self.year_month)
        except ValueError as exc:
            raise ValidationError(
                f"YearMonth must be a string in YYYYMM format: {exc}"
            ) from exc

        # bool is an int subclass but never a meaningful amount
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Amount must be an integer (received: {self.amount!r})"
            )

    @property
    def first_day(self) -> date:
        year, month = split_year_month(self.year_month)
        return date(year, month, 1)

    @property
    def last_day(self) -> date:
        year, month = split_year_month(self.year_month)
        return date(year, month, self.days_in_month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(*split_year_month(self.year_month))[1]

    def month_period(self) -> Period:
        """Returns the Period spanning the first to last day of the month."""
        return Period(self.first_day, self.last_day)

    def to_dict(self) -> Dict[str, Any]:
        return {"YearMonth": self.year_month, "Amount": self.amount}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Budget":
        """
        Creates a Budget from a plain mapping.

        Args:
            data: Mapping with "YearMonth" and "Amount" keys.

        Returns:
            Validated Budget instance.

        Raises:
            ValidationError: If the mapping is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValidationError("Object is required")
        if "YearMonth" not in data or "Amount" not in data:
            raise ValidationError("Object must contain 'YearMonth' and 'Amount'")
        return cls(year_month=data["YearMonth"], amount=data["Amount"])

    def __str__(self) -> str:
        return f"Budget({self.year_month}, {self.amount})"


@dataclass
class BudgetAllocation:
    """
    Prorated share of a single budget inside a query period.

    Attributes:
        budget: Source budget.
        overlapping_days: Days of the budget month inside the period.
        daily_amount: Budget amount divided by the days in its month.
        amount: daily_amount multiplied by overlapping_days.
    """

    budget: Budget
    overlapping_days: int
    daily_amount: Decimal
    amount: Decimal


@dataclass
class ProrationSnapshot:
    """
    Complete proration run with metadata for audit purposes.

    Attributes:
        timestamp: When the query was evaluated.
        version: MatchBudget version identifier.
        period: Query period.
        allocations: Budgets that overlap the period, in input order.
        total_amount: Sum of all allocation amounts.
    """

    timestamp: datetime
    version: str
    period: Period
    allocations: List[BudgetAllocation] = field(default_factory=list)
    total_amount: Decimal = Decimal("0")
