"""
MatchBudget - Audit Logger Tests.

Property-based and unit tests for AuditLogger class.
Tests ensure correct JSON serialisation, Decimal precision
preservation and round-trip consistency.
"""

import json
import tempfile
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis.strategies import composite, dates, integers, lists

from matchbudget.audit import AuditLogger, DecimalEncoder
from matchbudget.calculator import ProrationEngine
from matchbudget.schema import Budget, Period, ProrationSnapshot


def create_test_snapshot() -> ProrationSnapshot:
    """Creates the July/August example snapshot with an uneven February."""
    budgets = [Budget("202502", 1000), Budget("202507", 3100), Budget("202508", 310)]
    period = Period(date(2025, 2, 20), date(2025, 8, 14))
    return ProrationEngine().build_snapshot(
        budgets, period, timestamp=datetime(2025, 8, 14, 14, 30, 0)
    )


@composite
def snapshots(draw):
    """Generate snapshots over random 2025 budgets and query periods."""
    months = draw(lists(integers(min_value=1, max_value=12), unique=True, max_size=12))
    budgets = [
        Budget(f"2025{m:02d}", draw(integers(min_value=-100000, max_value=100000)))
        for m in months
    ]
    start = draw(dates(min_value=date(2025, 1, 1), max_value=date(2025, 12, 31)))
    length = draw(integers(min_value=0, max_value=200))
    return ProrationEngine().build_snapshot(
        budgets,
        Period(start, start + timedelta(days=length)),
        timestamp=datetime(2025, 1, 1, 8, 0, 0),
    )


class TestAuditLoggerUnit:
    """Unit tests for AuditLogger."""

    def setup_method(self) -> None:
        self.audit = AuditLogger()

    def test_serialise_produces_valid_json(self) -> None:
        data = json.loads(self.audit.serialise_snapshot(create_test_snapshot()))

        assert data["metadata"]["generated_by"] == "MatchBudget"
        assert data["query"] == {"start": "2025-02-20", "end": "2025-08-14"}
        assert data["summary"]["budget_count"] == 3

    def test_decimals_written_as_strings(self) -> None:
        data = json.loads(self.audit.serialise_snapshot(create_test_snapshot()))

        february = data["allocations"][0]
        assert february["budget"] == {"YearMonth": "202502", "Amount": 1000}
        assert february["overlapping_days"] == 9
        assert isinstance(february["daily_amount"], str)
        assert Decimal(february["amount"]) == Decimal(9000) / Decimal(28)

    def test_round_trip_preserves_precision(self) -> None:
        snapshot = create_test_snapshot()

        restored = self.audit.deserialise_snapshot(self.audit.serialise_snapshot(snapshot))

        assert restored.total_amount == snapshot.total_amount
        assert restored.period == snapshot.period
        assert restored.allocations == snapshot.allocations
        assert restored.timestamp == snapshot.timestamp

    def test_save_and_load_file(self) -> None:
        snapshot = create_test_snapshot()

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "audit.json"
            self.audit.save_to_file(snapshot, path)
            restored = self.audit.load_from_file(path)

        assert restored.total_amount == snapshot.total_amount

    def test_load_missing_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            self.audit.load_from_file("/nonexistent/audit.json")

    def test_malformed_budget_rejected_on_load(self) -> None:
        data = json.loads(self.audit.serialise_snapshot(create_test_snapshot()))
        data["allocations"][0]["budget"]["YearMonth"] = "2025-02"

        with pytest.raises(ValueError):
            self.audit.deserialise_snapshot(json.dumps(data))

    def test_decimal_encoder(self) -> None:
        encoded = json.dumps(
            {"a": Decimal("1.10"), "d": date(2025, 8, 1), "b": Budget("202508", 5)},
            cls=DecimalEncoder,
        )
        assert json.loads(encoded) == {
            "a": "1.10",
            "d": "2025-08-01",
            "b": {"YearMonth": "202508", "Amount": 5},
        }

    def test_generate_filename(self) -> None:
        name = self.audit.generate_filename()
        assert name.startswith("proration_audit_")
        assert name.endswith(".json")


class TestAuditLoggerProperty:
    """Property-based round-trip tests."""

    @given(snapshots())
    @settings(max_examples=50)
    def test_round_trip(self, snapshot: ProrationSnapshot) -> None:
        audit = AuditLogger()
        restored = audit.deserialise_snapshot(audit.serialise_snapshot(snapshot))

        assert restored.total_amount == snapshot.total_amount
        assert restored.allocations == snapshot.allocations
