"""
Tests for the FastAPI application.

Test categories:
- Happy path (valid request -> 201)
- Validation errors (duplicate IDs -> 400)
- Pydantic errors (missing fields -> 422)
- Run retrieval and listing
"""

import pytest
from fastapi.testclient import TestClient

from loan_allocator.api import app
from loan_allocator.run_store import run_store


# =============================================================================
# Test Client
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Create test client with an empty run store."""
    run_store.clear()
    return TestClient(app)


# =============================================================================
# Test Data
# =============================================================================


def make_valid_request() -> dict:
    """Create a valid allocation request payload."""
    return {
        "banks": [{"bank_id": 1, "bank_name": "Chase"}],
        "facilities": [
            {"facility_id": 1, "bank_id": 1, "interest_rate": 0.05, "amount": 1000},
            {"facility_id": 2, "bank_id": 1, "interest_rate": 0.03, "amount": 500},
        ],
        "covenants": [
            {"bank_id": 1, "max_default_likelihood": 0.5, "banned_state": "MT"},
        ],
        "loans": [
            {"loan_id": 1, "amount": 400, "interest_rate": 0.10, "default_likelihood": 0.1, "state": "CA"},
            {"loan_id": 2, "amount": 400, "interest_rate": 0.10, "default_likelihood": 0.1, "state": "MT"},
            {"loan_id": 3, "amount": 9000, "interest_rate": 0.10, "default_likelihood": 0.1, "state": "CA"},
        ],
    }


# =============================================================================
# Health
# =============================================================================


class TestHealth:

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# =============================================================================
# POST /api/allocations
# =============================================================================


class TestCreateAllocation:

    def test_happy_path(self, client: TestClient):
        response = client.post("/api/allocations", json=make_valid_request())

        assert response.status_code == 201
        data = response.json()
        assert data["assignments"] == [{"loan_id": 1, "facility_id": 2}]
        assert data["yields"] == [{"facility_id": 2, "expected_yield": -16}]
        assert data["funding_details"][0]["expected_yield"] == pytest.approx(-16.0)
        assert data["unfunded"] == [
            {"loan_id": 2, "reason": "covenants_not_met"},
            {"loan_id": 3, "reason": "insufficient_capacity"},
        ]

    def test_requests_are_independent(self, client: TestClient):
        """Each request starts from the submitted capacity."""
        first = client.post("/api/allocations", json=make_valid_request()).json()
        second = client.post("/api/allocations", json=make_valid_request()).json()

        assert first["assignments"] == second["assignments"]
        assert first["run_id"] != second["run_id"]

    def test_duplicate_loan_ids_rejected(self, client: TestClient):
        payload = make_valid_request()
        payload["loans"][1]["loan_id"] = 1

        response = client.post("/api/allocations", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_FAILED"

    def test_covenant_for_unknown_facility_is_skipped(self, client: TestClient):
        payload = make_valid_request()
        payload["covenants"].append({"bank_id": 1, "facility_id": 99, "banned_state": "CA"})

        response = client.post("/api/allocations", json=payload)

        assert response.status_code == 201
        assert response.json()["assignments"] == [{"loan_id": 1, "facility_id": 2}]

    def test_blank_loan_state_is_allocated(self, client: TestClient):
        payload = make_valid_request()
        payload["loans"][1]["state"] = ""

        response = client.post("/api/allocations", json=payload)

        assert response.status_code == 201
        assert response.json()["assignments"] == [
            {"loan_id": 1, "facility_id": 2},
            {"loan_id": 2, "facility_id": 1},
        ]

    def test_missing_field_is_422(self, client: TestClient):
        payload = make_valid_request()
        del payload["loans"][0]["state"]

        response = client.post("/api/allocations", json=payload)

        assert response.status_code == 422

    def test_empty_loans_is_422(self, client: TestClient):
        payload = make_valid_request()
        payload["loans"] = []

        response = client.post("/api/allocations", json=payload)

        assert response.status_code == 422


# =============================================================================
# GET /api/allocations
# =============================================================================


class TestRuns:

    def test_get_run(self, client: TestClient):
        run_id = client.post("/api/allocations", json=make_valid_request()).json()["run_id"]

        response = client.get(f"/api/allocations/{run_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["loan_count"] == 3
        assert data["response"]["run_id"] == run_id

    def test_get_unknown_run(self, client: TestClient):
        response = client.get("/api/allocations/does-not-exist")
        assert response.status_code == 404

    def test_failed_run_recorded(self, client: TestClient):
        payload = make_valid_request()
        payload["facilities"][1]["facility_id"] = 1
        client.post("/api/allocations", json=payload, params={"batch_id": "b1"})

        runs = client.get("/api/allocations", params={"batch_id": "b1"}).json()

        assert len(runs) == 1
        assert runs[0]["status"] == "failed"
        assert runs[0]["funded_count"] == 0

    def test_list_runs(self, client: TestClient):
        for _ in range(3):
            client.post("/api/allocations", json=make_valid_request())

        runs = client.get("/api/allocations", params={"limit": 2}).json()

        assert len(runs) == 2
        assert runs[0]["funded_count"] == 1
