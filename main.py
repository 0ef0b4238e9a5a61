"""
MatchBudget - Main Entry Point.

Demo driver for the two engines: prorates monthly budgets over a date
range, and replays match events onto a match result string.

Usage:
    python main.py budget --start <YYYY-MM-DD> --end <YYYY-MM-DD>
                          [--csv <file>] [--output-dir <dir>]
    python main.py match [--result <string>] <event> [<event> ...]

Example:
    python main.py budget --start 2025-07-30 --end 2025-08-14
    python main.py match --result HHA home cancel-home next-period
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from matchbudget import __version__
from matchbudget.audit import AuditLogger
from matchbudget.calculator import ProrationEngine
from matchbudget.date_logic import DateManager
from matchbudget.excel_generator import ExcelReporter
from matchbudget.match_result import (
    UpdateRuleViolation,
    apply_event,
    describe_event,
    format_display,
)
from matchbudget.schema import Event, InvalidRange, Period, ProrationSnapshot
from matchbudget.store import BudgetStore
from matchbudget.validator import DataValidator


EVENT_NAMES = {
    "home": Event.HOME_GOAL,
    "away": Event.AWAY_GOAL,
    "cancel-home": Event.CANCEL_HOME_GOAL,
    "cancel-away": Event.CANCEL_AWAY_GOAL,
    "next-period": Event.NEXT_PERIOD,
}


def print_header() -> None:
    print("=" * 60)
    print("  MatchBudget - Scoreboard & Budget Proration")
    print(f"  Version: {__version__}")
    print("=" * 60)
    print()


def print_summary(snapshot: ProrationSnapshot) -> None:
    """
    Prints the proration breakdown to the console.

    Args:
        snapshot: Proration snapshot with results.
    """
    print("  PRORATION SUMMARY")
    print("  " + "-" * 40)
    print(f"  Period:            {snapshot.period} ({snapshot.period.days} days)")
    for allocation in snapshot.allocations:
        print(
            f"  {allocation.budget.year_month}:  "
            f"{allocation.overlapping_days:>2} days x {allocation.daily_amount:,.4f}"
            f" = {allocation.amount:,.2f}"
        )
    print(f"  Total:             {snapshot.total_amount:,.2f}")
    print()


def run_budget(
    start: date,
    end: date,
    csv_path: Optional[Path],
    output_dir: Optional[Path]
) -> int:
    """
    Runs a budget proration query.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    print_header()

    try:
        period = Period(start, end)
    except InvalidRange as e:
        print(f"  ERROR: {e}")
        return 1

    if csv_path is None:
        budgets = BudgetStore().get_all()
        print(f"  Using {len(budgets)} built-in budgets")
    else:
        print(f"  Loading: {csv_path}")
        try:
            result = DataValidator().validate_csv(csv_path)
        except (FileNotFoundError, ValueError) as e:
            print(f"  ERROR: {e}")
            return 1

        if not result.is_valid:
            print(f"  VALIDATION ERRORS ({result.error_count} errors):")
            for error in result.errors[:10]:
                print(f"     {error}")
            if result.error_count > 10:
                print(f"     ... and {result.error_count - 10} more errors")
            return 1

        budgets = result.budgets
        print(f"  Validated {result.valid_count} budgets")

    engine = ProrationEngine(DateManager())
    snapshot = engine.build_snapshot(budgets, period)
    print()
    print_summary(snapshot)

    if output_dir is not None:
        audit_logger = AuditLogger()
        audit_path = output_dir / audit_logger.generate_filename()
        audit_logger.save_to_file(snapshot, audit_path)
        print(f"  Audit log saved: {audit_path}")

        reporter = ExcelReporter()
        excel_path = output_dir / reporter.generate_filename()
        reporter.generate_report(snapshot, excel_path)
        print(f"  Excel report saved: {excel_path}")

    return 0


def run_match(result: str, events: List[str]) -> int:
    """
    Replays events onto a match result and prints each step.

    Returns:
        Exit code (0 for success, 1 if an event was rejected).
    """
    print_header()
    print(f"  Start:             {result!r} -> {format_display(result)}")

    for name in events:
        event = EVENT_NAMES[name]
        try:
            result = apply_event(result, event)
        except UpdateRuleViolation as e:
            print(f"  REJECTED {name}: {e.message}")
            print(f"  {e}")
            return 1
        print(f"  {describe_event(event):<26} {result!r} -> {format_display(result)}")

    print()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MatchBudget - match scoreboard and budget proration demo"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    budget = subparsers.add_parser("budget", help="Prorate budgets over a date range")
    budget.add_argument("--start", type=date.fromisoformat, required=True,
                        help="First day of the query (YYYY-MM-DD)")
    budget.add_argument("--end", type=date.fromisoformat, required=True,
                        help="Last day of the query (YYYY-MM-DD)")
    budget.add_argument("--csv", type=Path, default=None,
                        help="Budget CSV with YearMonth and Amount columns "
                             "(default: built-in budgets)")
    budget.add_argument("--output-dir", type=Path, default=None,
                        help="Write JSON audit and Excel report to this directory")

    match = subparsers.add_parser("match", help="Apply events to a match result")
    match.add_argument("--result", default="",
                       help="Starting match result string (default: empty)")
    match.add_argument("events", nargs="+", choices=sorted(EVENT_NAMES),
                       help="Events to apply in order")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.command == "budget":
        return run_budget(args.start, args.end, args.csv, args.output_dir)
    return run_match(args.result, args.events)


if __name__ == "__main__":
    sys.exit(main())
