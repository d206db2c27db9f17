"""
In-memory run store for tracking allocation runs.

This module provides a thread-safe in-memory store for run records.
Runs are stored with UUID-based IDs and can be queried by ID or batch_id.

Note: Data is lost on restart.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from loan_allocator.models import AllocationResponse


@dataclass
class RunRecord:
    """
    Record of a single allocation run.

    Attributes:
        run_id: Unique identifier (UUID4 format)
        batch_id: Optional caller-supplied identifier for grouping runs
        loan_count: Number of loans submitted
        response: AllocationResponse if the run completed
        error: Error message if the run failed validation
        created_at: ISO format timestamp of run creation
    """

    run_id: str
    batch_id: Optional[str]
    loan_count: int
    response: Optional[AllocationResponse]
    error: Optional[str]
    created_at: str


class RunStore:
    """
    Thread-safe in-memory store for run records.

    Uses a dict for O(1) lookup by run_id and a lock for thread safety.
    Runs are stored in insertion order.
    """

    def __init__(self) -> None:
        self._runs: dict[str, RunRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: RunRecord) -> None:
        """Store a new run record, replacing any record with the same run_id."""
        with self._lock:
            self._runs[record.run_id] = record

    def get(self, run_id: str) -> Optional[RunRecord]:
        with self._lock:
            return self._runs.get(run_id)

    def list_runs(
        self,
        batch_id: Optional[str] = None,
        limit: int = 10,
    ) -> list[RunRecord]:
        """
        List runs, optionally filtered by batch_id.

        Args:
            batch_id: If provided, filter to runs with this batch_id
            limit: Maximum number of runs to return (default 10)

        Returns:
            List of RunRecord objects, most recent first
        """
        with self._lock:
            runs = list(self._runs.values())

        if batch_id is not None:
            runs = [r for r in runs if r.batch_id == batch_id]

        runs.reverse()
        return runs[:limit]

    def clear(self) -> None:
        """Clear all run records. Useful for testing."""
        with self._lock:
            self._runs.clear()


# Singleton instance for use across the application
run_store = RunStore()
