"""
MatchBudget - Audit and Serialisation Module.

This module provides JSON serialisation for proration runs. All Decimal
values are written as strings so that a saved snapshot loads back with
full precision.

Classes:
    DecimalEncoder: JSON encoder for Decimal, date and datetime values.
    AuditLogger: Manages JSON serialisation for audit and persistence.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

from matchbudget import __version__
from matchbudget.schema import (
    Budget,
    BudgetAllocation,
    Period,
    ProrationSnapshot,
)


class DecimalEncoder(json.JSONEncoder):
    """
    Custom JSON encoder that converts Decimal to string.

    Preserves full precision of Decimal values by encoding them
    as strings rather than floats.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        if isinstance(obj, Budget):
            return obj.to_dict()
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation for audit and persistence.

    Example:
        >>> audit = AuditLogger()
        >>> json_str = audit.serialise_snapshot(snapshot)
        >>> restored = audit.deserialise_snapshot(json_str)
        >>> assert snapshot.total_amount == restored.total_amount
    """

    def __init__(self, version: Optional[str] = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Version identifier written into snapshots.
                Defaults to the package version.
        """
        self._version = version or __version__

    def serialise_snapshot(self, snapshot: ProrationSnapshot) -> str:
        """
        Serialises a ProrationSnapshot to a JSON string.

        Args:
            snapshot: Snapshot to serialise.

        Returns:
            JSON string representation.
        """
        data = self._snapshot_to_dict(snapshot)
        return json.dumps(data, cls=DecimalEncoder, indent=2)

    def deserialise_snapshot(self, json_str: str) -> ProrationSnapshot:
        """
        Deserialises a JSON string to a ProrationSnapshot.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Reconstructed ProrationSnapshot.

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
            ValueError: If values are invalid, including malformed
                budgets and inverted periods.
        """
        data = json.loads(json_str)
        return self._dict_to_snapshot(data)

    def save_to_file(
        self,
        snapshot: ProrationSnapshot,
        file_path: Union[str, Path]
    ) -> None:
        """Saves a ProrationSnapshot to a JSON file, creating parent dirs."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.serialise_snapshot(snapshot), encoding="utf-8")

    def load_from_file(self, file_path: Union[str, Path]) -> ProrationSnapshot:
        """
        Loads a ProrationSnapshot from a JSON file.

        Raises:
            FileNotFoundError: If file does not exist.
            json.JSONDecodeError: If JSON is malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Audit file not found: {file_path}")

        return self.deserialise_snapshot(file_path.read_text(encoding="utf-8"))

    def _snapshot_to_dict(self, snapshot: ProrationSnapshot) -> Dict[str, Any]:
        return {
            "metadata": {
                "timestamp": snapshot.timestamp.isoformat(),
                "version": snapshot.version,
                "written_by": self._version,
                "generated_by": "MatchBudget",
            },
            "query": {
                "start": snapshot.period.start.isoformat(),
                "end": snapshot.period.end.isoformat(),
            },
            "summary": {
                "total_amount": str(snapshot.total_amount),
                "budget_count": len(snapshot.allocations),
            },
            "allocations": [
                self._allocation_to_dict(allocation)
                for allocation in snapshot.allocations
            ],
        }

    def _allocation_to_dict(self, allocation: BudgetAllocation) -> Dict[str, Any]:
        return {
            "budget": allocation.budget.to_dict(),
            "overlapping_days": allocation.overlapping_days,
            "daily_amount": str(allocation.daily_amount),
            "amount": str(allocation.amount),
        }

    def _dict_to_snapshot(self, data: Dict[str, Any]) -> ProrationSnapshot:
        metadata = data["metadata"]
        query = data["query"]
        summary = data["summary"]

        return ProrationSnapshot(
            timestamp=datetime.fromisoformat(metadata["timestamp"]),
            version=metadata["version"],
            period=Period(
                date.fromisoformat(query["start"]),
                date.fromisoformat(query["end"]),
            ),
            allocations=[
                self._dict_to_allocation(item) for item in data["allocations"]
            ],
            total_amount=Decimal(summary["total_amount"]),
        )

    def _dict_to_allocation(self, data: Dict[str, Any]) -> BudgetAllocation:
        return BudgetAllocation(
            budget=Budget.from_dict(data["budget"]),
            overlapping_days=data["overlapping_days"],
            daily_amount=Decimal(data["daily_amount"]),
            amount=Decimal(data["amount"]),
        )

    def generate_filename(self, prefix: str = "proration_audit") -> str:
        """
        Generates a timestamped filename for audit files.

        Returns:
            Filename like "proration_audit_2025-08-14_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
