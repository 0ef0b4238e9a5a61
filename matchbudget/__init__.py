"""
MatchBudget - Match Scoreboard and Budget Proration Toolkit.

Two small in-memory libraries: a match result engine that keeps goal events
as a compact tag string, and a proration engine that spreads monthly budget
amounts across arbitrary date periods.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "MatchBudget Team"
