"""
MatchBudget - Date Logic Module.

This module provides the calendar calculations used for budget proration,
including leap year detection, days-in-month calculations, month
boundaries for YYYYMM identifiers and inclusive day counting.

Classes:
    DateManager: Manages all date-related calculations for proration.

Functions:
    split_year_month: Splits a YYYYMM identifier into year and month.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Optional, Tuple


# Exactly six ASCII digits: four for the year, two for the month
YEAR_MONTH_PATTERN = re.compile(r"[0-9]{6}")


def split_year_month(year_month: str) -> Tuple[int, int]:
    """
    Splits a YYYYMM identifier into its year and month.

    Args:
        year_month: Six-digit identifier such as "202508".

    Returns:
        Tuple of (year, month).

    Raises:
        ValueError: If the identifier is not six digits, the month is
            outside 1-12 or the year is 0000.
    """
    if not isinstance(year_month, str) or not YEAR_MONTH_PATTERN.fullmatch(year_month):
        raise ValueError(
            f"Invalid YearMonth format: {year_month!r}. Expected format: YYYYMM"
        )

    year = int(year_month[:4])
    month = int(year_month[4:])
    if not 1 <= month <= 12:
        raise ValueError(
            f"Invalid YearMonth month: {year_month!r}. Month must be 01-12"
        )
    if year < 1:
        raise ValueError(f"Invalid YearMonth year: {year_month!r}")
    return year, month


class DateManager:
    """
    Manages date calculations for budget proration.

    Handles month boundaries, leap year logic and inclusive day counts.
    All comparisons work at day granularity.

    Example:
        >>> dm = DateManager()
        >>> dm.get_days_in_month(2024, 2)
        29
        >>> dm.last_day_of_month("202508")
        datetime.date(2025, 8, 31)
    """

    RANGE_KINDS = ("today", "week", "month", "year")

    def is_leap_year(self, year: int) -> bool:
        """
        Determines if the specified year is a leap year.

        Args:
            year: Four-digit year to check.

        Returns:
            True if the year is a leap year, False otherwise.
        """
        return calendar.isleap(year)

    def get_days_in_month(self, year: int, month: int) -> int:
        """
        Returns the total number of days in the specified month.

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Number of days in the specified month (28-31).

        Raises:
            ValueError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        return calendar.monthrange(year, month)[1]

    def parse_year_month(self, year_month: str) -> Tuple[int, int]:
        """Splits a YYYYMM identifier into (year, month); see split_year_month."""
        return split_year_month(year_month)

    def format_year_month(self, value: date) -> str:
        """Returns the YYYYMM identifier of the month containing value."""
        return f"{value.year:04d}{value.month:02d}"

    def first_day_of_month(self, year_month: str) -> date:
        """Returns the first calendar day of a YYYYMM month."""
        year, month = self.parse_year_month(year_month)
        return date(year, month, 1)

    def last_day_of_month(self, year_month: str) -> date:
        """Returns the last calendar day of a YYYYMM month."""
        year, month = self.parse_year_month(year_month)
        return date(year, month, self.get_days_in_month(year, month))

    def days_between(self, start: date, end: date) -> int:
        """
        Counts the days from start to end, inclusive of both.

        The result is zero or negative when end falls before start, so
        callers must check ordering first.

        Args:
            start: First day of the range.
            end: Last day of the range.

        Returns:
            Inclusive day count.
        """
        return (end - start).days + 1

    def get_current_month_range(
        self,
        reference_date: Optional[date] = None
    ) -> Tuple[date, date]:
        """
        Returns the first and last day of the month containing a date.

        Args:
            reference_date: Date inside the month. Defaults to today.

        Returns:
            Tuple of (first_day, last_day).
        """
        return self.get_date_range("month", reference_date)

    def get_date_range(
        self,
        kind: str,
        reference_date: Optional[date] = None
    ) -> Tuple[date, date]:
        """
        Returns the calendar range of the given kind around a date.

        Weeks run Sunday to Saturday.

        Args:
            kind: One of "today", "week", "month" or "year".
            reference_date: Date inside the range. Defaults to today.

        Returns:
            Tuple of (start, end) dates, both inclusive.

        Raises:
            ValueError: If kind is not supported.
        """
        if reference_date is None:
            reference_date = date.today()

        if kind == "today":
            return reference_date, reference_date
        elif kind == "week":
            # weekday() counts from Monday; shift so Sunday starts the week
            start = reference_date - timedelta(days=(reference_date.weekday() + 1) % 7)
            return start, start + timedelta(days=6)
        elif kind == "month":
            last = self.get_days_in_month(reference_date.year, reference_date.month)
            return (
                reference_date.replace(day=1),
                reference_date.replace(day=last),
            )
        elif kind == "year":
            return date(reference_date.year, 1, 1), date(reference_date.year, 12, 31)

        raise ValueError(
            f"Unsupported period: {kind}. Expected one of {', '.join(self.RANGE_KINDS)}"
        )
