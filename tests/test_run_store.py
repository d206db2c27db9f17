"""
Tests for run_store module.
"""

import pytest

from loan_allocator.models import AllocationResponse
from loan_allocator.run_store import RunRecord, RunStore


def make_record(run_id: str, batch_id: str = None, completed: bool = True) -> RunRecord:
    response = (
        AllocationResponse(run_id=run_id, created_at="2025-01-01T00:00:00Z") if completed else None
    )
    return RunRecord(
        run_id=run_id,
        batch_id=batch_id,
        loan_count=3,
        response=response,
        error=None if completed else "Validation failed",
        created_at="2025-01-01T00:00:00Z",
    )


class TestRunStore:

    @pytest.fixture
    def store(self) -> RunStore:
        """Create a fresh store for each test."""
        return RunStore()

    def test_create_and_get(self, store: RunStore):
        store.create(make_record("run-1"))

        result = store.get("run-1")

        assert result is not None
        assert result.loan_count == 3

    def test_get_not_found(self, store: RunStore):
        assert store.get("nonexistent") is None

    def test_list_most_recent_first(self, store: RunStore):
        for i in range(3):
            store.create(make_record(f"run-{i}"))

        result = store.list_runs()

        assert [r.run_id for r in result] == ["run-2", "run-1", "run-0"]

    def test_list_limit(self, store: RunStore):
        for i in range(5):
            store.create(make_record(f"run-{i}"))

        assert len(store.list_runs(limit=2)) == 2

    def test_list_filtered_by_batch(self, store: RunStore):
        store.create(make_record("run-1", batch_id="a"))
        store.create(make_record("run-2", batch_id="b"))
        store.create(make_record("run-3", batch_id="a"))

        result = store.list_runs(batch_id="a")

        assert [r.run_id for r in result] == ["run-3", "run-1"]

    def test_clear(self, store: RunStore):
        store.create(make_record("run-1"))
        store.clear()
        assert store.list_runs() == []
