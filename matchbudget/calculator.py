"""
MatchBudget - Proration Engine Module.

This module provides the budget proration engine. A monthly budget is
spread evenly over the days of its month, and the share falling inside a
query period is the daily amount times the number of shared days. All
calculations use Decimal arithmetic and are never rounded here.

Classes:
    ProrationEngine: Core calculation engine for prorated budget amounts.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from matchbudget import __version__
from matchbudget.date_logic import DateManager
from matchbudget.schema import (
    Budget,
    BudgetAllocation,
    Period,
    ProrationSnapshot,
)


logger = logging.getLogger(__name__)


class ProrationEngine:
    """
    Core calculation engine for budget proration.

    The engine holds no state besides its DateManager, so one instance
    can serve any number of independent queries.

    Attributes:
        date_manager: DateManager instance for day counting.

    Example:
        >>> engine = ProrationEngine(DateManager())
        >>> budgets = [Budget("202507", 3100), Budget("202508", 310)]
        >>> period = Period(date(2025, 7, 30), date(2025, 8, 14))
        >>> engine.query_total_amount(budgets, period)
        Decimal('340')
    """

    def __init__(self, date_manager: Optional[DateManager] = None):
        """
        Initialises the ProrationEngine with a DateManager.

        Args:
            date_manager: DateManager instance for date calculations.
                Defaults to a new DateManager.
        """
        self._date_manager = date_manager or DateManager()

    def daily_amount(self, budget: Budget) -> Decimal:
        """
        Calculates the amount allotted to each day of the budget month.

        Formula: Amount / Days_In_Month

        Args:
            budget: Budget to spread.

        Returns:
            Unrounded daily amount.
        """
        return Decimal(budget.amount) / Decimal(budget.days_in_month)

    def overlapping_days(self, period_a: Period, period_b: Period) -> int:
        """
        Counts the calendar days shared by two periods.

        Args:
            period_a: First period.
            period_b: Second period.

        Returns:
            Inclusive count of shared days, 0 if the periods are disjoint.
        """
        effective_start = max(period_a.start, period_b.start)
        effective_end = min(period_a.end, period_b.end)

        if effective_start > effective_end:
            return 0
        return self._date_manager.days_between(effective_start, effective_end)

    def overlapping_amount(self, budget: Budget, query_period: Period) -> Decimal:
        """
        Calculates the part of a budget that falls inside a period.

        Formula: Daily_Amount * Overlapping_Days, evaluated as
        Amount * Overlapping_Days / Days_In_Month.

        Args:
            budget: Budget to prorate.
            query_period: Period being queried.

        Returns:
            Prorated amount, Decimal('0') when there is no overlap.
        """
        days = self.overlapping_days(budget.month_period(), query_period)
        if days == 0:
            return Decimal("0")
        return self._prorate(budget, days)

    def _prorate(self, budget: Budget, days: int) -> Decimal:
        # Multiply before dividing so that whole months come back exact
        return Decimal(budget.amount * days) / Decimal(budget.days_in_month)

    @staticmethod
    def _sum(amounts: Iterable[Decimal]) -> Decimal:
        # Fixed summation order keeps the rounded total independent of input order
        return sum(sorted(amounts), Decimal("0"))

    def query_total_amount(
        self,
        budgets: Iterable[Budget],
        query_period: Period
    ) -> Decimal:
        """
        Sums the prorated amounts of all budgets for a period.

        Args:
            budgets: Budgets to include. Order does not matter.
            query_period: Period being queried. Its construction has
                already rejected inverted ranges.

        Returns:
            Total prorated amount.
        """
        return self._sum(
            self.overlapping_amount(budget, query_period) for budget in budgets
        )

    def query_total_amount_between(
        self,
        budgets: Iterable[Budget],
        start: date,
        end: date
    ) -> Decimal:
        """
        Sums the prorated amounts of all budgets between two dates.

        Args:
            budgets: Budgets to include.
            start: First day of the query range.
            end: Last day of the query range.

        Returns:
            Total prorated amount.

        Raises:
            InvalidRange: If start falls after end.
        """
        query_period = Period(start, end)
        logger.debug("Querying budget from %s to %s", query_period.start, query_period.end)
        return self.query_total_amount(budgets, query_period)

    def allocate(
        self,
        budgets: Iterable[Budget],
        query_period: Period
    ) -> List[BudgetAllocation]:
        """
        Breaks a query down into per-budget allocations.

        Budgets that share no day with the period are left out.

        Args:
            budgets: Budgets to include.
            query_period: Period being queried.

        Returns:
            Allocations in input order.
        """
        allocations: List[BudgetAllocation] = []

        for budget in budgets:
            days = self.overlapping_days(budget.month_period(), query_period)
            if days == 0:
                continue

            allocations.append(BudgetAllocation(
                budget=budget,
                overlapping_days=days,
                daily_amount=self.daily_amount(budget),
                amount=self._prorate(budget, days),
            ))

        return allocations

    def build_snapshot(
        self,
        budgets: Iterable[Budget],
        query_period: Period,
        timestamp: Optional[datetime] = None
    ) -> ProrationSnapshot:
        """
        Performs a complete proration run for reporting.

        Args:
            budgets: Budgets to include.
            query_period: Period being queried.
            timestamp: Run time. Defaults to now.

        Returns:
            ProrationSnapshot with allocations and their total.
        """
        allocations = self.allocate(budgets, query_period)
        total = self._sum(a.amount for a in allocations)

        logger.debug(
            "Prorated %d budgets over %s: total %s",
            len(allocations), query_period, total
        )

        return ProrationSnapshot(
            timestamp=timestamp or datetime.now(),
            version=__version__,
            period=query_period,
            allocations=allocations,
            total_amount=total,
        )
