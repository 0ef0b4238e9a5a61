"""
MatchBudget - In-Memory Store Module.

This module provides mock data sources for both engines. Nothing is
persisted: each store instance owns its own records, and callers create
and pass stores explicitly.

Classes:
    BudgetStore: Keeps Budget records keyed by YearMonth.
    MatchStore: Keeps match result strings keyed by match identifier.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from matchbudget.date_logic import DateManager
from matchbudget.match_result import UpdateRuleViolation, apply_event, parse_to_display
from matchbudget.schema import Budget, Event, MatchScore, ValidationError


logger = logging.getLogger(__name__)

DEFAULT_BUDGETS = [
    Budget("202501", 15000),
    Budget("202502", 18000),
    Budget("202503", 22000),
    Budget("202504", 19500),
    Budget("202505", 21000),
    Budget("202506", 17500),
    Budget("202507", 23000),
    Budget("202508", 20000),
    Budget("202509", 18500),
    Budget("202510", 25000),
    Budget("202511", 19000),
    Budget("202512", 24000),
]

DEFAULT_MATCH_RESULT = "HHA;A"


class BudgetStore:
    """
    In-memory collection of budgets, at most one per month.

    Example:
        >>> store = BudgetStore()
        >>> store.get_by_year_month("202508")
        Budget(year_month='202508', amount=20000)
    """

    def __init__(
        self,
        budgets: Optional[Iterable[Budget]] = None,
        date_manager: Optional[DateManager] = None
    ):
        """
        Initialises the store.

        Args:
            budgets: Initial budgets. Defaults to DEFAULT_BUDGETS.
            date_manager: DateManager for YearMonth handling.
        """
        self._date_manager = date_manager or DateManager()
        self._budgets: List[Budget] = []
        for budget in DEFAULT_BUDGETS if budgets is None else budgets:
            self.add(budget)

    def get_all(self) -> List[Budget]:
        """Returns a copy of all budgets in insertion order."""
        return list(self._budgets)

    def get_by_year_month(self, year_month: str) -> Optional[Budget]:
        """
        Returns the budget for a month, or None if there is none.

        Raises:
            ValidationError: If year_month is not a valid YYYYMM value.
        """
        self._check_year_month(year_month)
        return next(
            (b for b in self._budgets if b.year_month == year_month),
            None
        )

    def get_by_year(self, year: str) -> List[Budget]:
        """
        Returns all budgets of a four-digit year.

        Raises:
            ValidationError: If year is not four digits.
        """
        if not isinstance(year, str) or len(year) != 4 or not (year.isascii() and year.isdigit()):
            raise ValidationError(
                f"Invalid year format: {year!r}. Expected format: YYYY"
            )
        return [b for b in self._budgets if b.year_month.startswith(year)]

    def budget_for_month(self, day: date) -> Optional[Budget]:
        """Returns the budget of the month containing day."""
        return self.get_by_year_month(self._date_manager.format_year_month(day))

    def budgets_for_year(self, year: Union[int, date]) -> List[Budget]:
        """Returns the budgets of a year given as a number or a date."""
        if isinstance(year, date):
            year = year.year
        return self.get_by_year(f"{year:04d}")

    def add(self, budget: Budget) -> Budget:
        """
        Adds a budget for a month that has none yet.

        Raises:
            ValueError: If the month already has a budget.
        """
        if self._index_of(budget.year_month) != -1:
            raise ValueError(f"Budget for YearMonth {budget.year_month} already exists")

        self._budgets.append(budget)
        logger.debug("Added %s", budget)
        return budget

    def update(self, budget: Budget) -> Budget:
        """
        Replaces the budget of an existing month.

        Raises:
            KeyError: If the month has no budget.
        """
        index = self._index_of(budget.year_month)
        if index == -1:
            raise KeyError(f"Budget for YearMonth {budget.year_month} not found")

        self._budgets[index] = budget
        logger.debug("Updated %s", budget)
        return budget

    def delete(self, year_month: str) -> bool:
        """
        Removes the budget of a month.

        Returns:
            True if a budget was removed, False if none existed.
        """
        self._check_year_month(year_month)
        index = self._index_of(year_month)
        if index == -1:
            return False

        removed = self._budgets.pop(index)
        logger.debug("Deleted %s", removed)
        return True

    def get_total_amount(self) -> int:
        """Returns the sum of all full monthly amounts."""
        return sum(b.amount for b in self._budgets)

    def _index_of(self, year_month: str) -> int:
        for index, budget in enumerate(self._budgets):
            if budget.year_month == year_month:
                return index
        return -1

    def _check_year_month(self, year_month: str) -> None:
        try:
            self._date_manager.parse_year_month(year_month)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc


class MatchStore:
    """
    In-memory match results keyed by match identifier.

    Unknown matches start from DEFAULT_MATCH_RESULT. A failed update
    leaves the stored result untouched and re-raises the violation.

    Example:
        >>> store = MatchStore()
        >>> store.update_match_result(1, Event.HOME_GOAL)
        'HHA;AH'
    """

    def __init__(
        self,
        results: Optional[Dict[int, str]] = None,
        default_result: str = DEFAULT_MATCH_RESULT
    ):
        self._results: Dict[int, str] = dict(results or {})
        self._default_result = default_result

    def query_match_result(self, match_id: int) -> str:
        """Returns the raw result string of a match."""
        return self._results.get(match_id, self._default_result)

    def query_display(self, match_id: int) -> MatchScore:
        """Returns the decoded score of a match."""
        return parse_to_display(self.query_match_result(match_id))

    def update_match_result(self, match_id: int, event: Union[Event, int]) -> str:
        """
        Applies an event to a match and stores the new result.

        Args:
            match_id: Match identifier.
            event: Event to apply.

        Returns:
            The stored result after the update.

        Raises:
            UpdateRuleViolation: If the event cannot be applied. The
                stored result is unchanged.
        """
        current = self.query_match_result(match_id)
        try:
            updated = apply_event(current, event)
        except UpdateRuleViolation:
            logger.warning("Rejected event %r for match %s (result %r)", event, match_id, current)
            raise

        self._results[match_id] = updated
        logger.debug("Match %s: %r -> %r", match_id, current, updated)
        return updated
