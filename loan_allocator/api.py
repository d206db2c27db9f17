"""
FastAPI application for the loan allocator.

A thin layer that validates the request and delegates to the orchestrator.
Every request allocates against its own copy of the submitted facilities.

Endpoints:
    GET /health - Service status
    POST /api/allocations - Run an allocation over submitted records
    GET /api/allocations/{run_id} - Get a single run by ID
    GET /api/allocations - List runs
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, status

from loan_allocator.config import config_from_env
from loan_allocator.models import AllocationRequest, AllocationResponse, ErrorResponse
from loan_allocator.orchestrator import run_allocation
from loan_allocator.reporting import summarize_yields, to_assignments
from loan_allocator.run_store import RunRecord, run_store
from loan_allocator.validation import ValidationError, validate_and_raise


env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

logger = logging.getLogger(__name__)

config = config_from_env()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Loan Allocator API",
    version="1.0.0",
    description="Allocates loans to bank facilities under covenants and capacity",
)


@app.get(
    "/health",
    summary="Health check",
    description="Returns service health status",
    tags=["System"],
)
def health_check() -> dict:
    return {
        "status": "healthy",
        "service": "Loan Allocator API",
        "version": "1.0.0",
    }


# =============================================================================
# Allocation Endpoints
# =============================================================================


@app.post(
    "/api/allocations",
    status_code=status.HTTP_201_CREATED,
    response_model=AllocationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid records"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Run an allocation",
    tags=["Allocations"],
)
def create_allocation(
    request: AllocationRequest,
    batch_id: Optional[str] = Query(None, description="Optional batch identifier"),
) -> AllocationResponse:
    """
    Allocate the submitted loans and store the run.

    Status Codes:
        201: Run completed (unfunded loans are a normal outcome)
        400: Cross-record validation failed (duplicate IDs)
        422: Pydantic validation error (automatic)
        500: Unexpected error
    """
    run_id = str(uuid4())
    created_at = datetime.now(timezone.utc).isoformat()

    logger.info(f"Creating run {run_id} for batch={batch_id} ({len(request.loans)} loans)")

    try:
        validate_and_raise(
            banks=request.banks,
            facilities=request.facilities,
            covenants=request.covenants,
            loans=request.loans,
        )
    except ValidationError as e:
        run_store.create(
            RunRecord(
                run_id=run_id,
                batch_id=batch_id,
                loan_count=len(request.loans),
                response=None,
                error=str(e.errors),
                created_at=created_at,
            )
        )
        logger.info(f"Run {run_id} failed (validation): {e.errors}")
        error_response = ErrorResponse(
            error="Validation failed",
            detail=str(e.errors),
            code="VALIDATION_FAILED",
        )
        raise HTTPException(status_code=400, detail=error_response.model_dump())

    try:
        outcome = run_allocation(request, config=config)
    except Exception as e:
        logger.exception(f"Run {run_id} failed (unexpected)")
        error_response = ErrorResponse(
            error="Internal error",
            detail=str(e),
            code="INTERNAL_ERROR",
        )
        raise HTTPException(status_code=500, detail=error_response.model_dump())

    response = AllocationResponse(
        run_id=run_id,
        funding_details=outcome.funded,
        assignments=to_assignments(outcome.funded),
        yields=summarize_yields(outcome.funded),
        unfunded=outcome.unfunded,
        created_at=created_at,
    )
    run_store.create(
        RunRecord(
            run_id=run_id,
            batch_id=batch_id,
            loan_count=len(request.loans),
            response=response,
            error=None,
            created_at=created_at,
        )
    )

    logger.info(
        f"Run {run_id} completed: {len(outcome.funded)} funded, {len(outcome.unfunded)} unfunded"
    )
    return response


@app.get(
    "/api/allocations/{run_id}",
    summary="Get a single run by ID",
    tags=["Allocations"],
)
def get_allocation(run_id: str) -> dict:
    """
    Get a single run by ID.

    Status Codes:
        200: Run found
        404: Run not found
    """
    record = run_store.get(run_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Run not found",
        )

    return {
        "run_id": record.run_id,
        "batch_id": record.batch_id,
        "status": "completed" if record.response else "failed",
        "loan_count": record.loan_count,
        "response": record.response,
        "error": record.error,
        "created_at": record.created_at,
    }


@app.get(
    "/api/allocations",
    summary="List runs",
    description="Lists runs, optionally filtered by batch_id.",
    tags=["Allocations"],
)
def list_allocations(
    batch_id: Optional[str] = Query(None, description="Filter by batch ID"),
    limit: int = Query(10, ge=1, le=100, description="Maximum runs to return"),
) -> list[dict]:
    """Summary list of runs, most recent first, without the full response."""
    records = run_store.list_runs(batch_id=batch_id, limit=limit)

    return [
        {
            "run_id": r.run_id,
            "batch_id": r.batch_id,
            "status": "completed" if r.response else "failed",
            "loan_count": r.loan_count,
            "funded_count": len(r.response.funding_details) if r.response else 0,
            "created_at": r.created_at,
        }
        for r in records
    ]
