"""
Pydantic models for the loan allocator.

This module contains all data models: the four input record types, the
per-loan funding results, and the HTTP request/response bodies.
Models handle validation and serialization only - capacity accounting on
Facility is the single exception, since available_amount is owned state.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Enums
# =============================================================================


class UnfundedReason(str, Enum):
    """Why the allocation engine left a loan unfunded."""

    INSUFFICIENT_CAPACITY = "insufficient_capacity"  # No facility can absorb the amount
    COVENANTS_NOT_MET = "covenants_not_met"  # Capacity existed, every candidate failed covenants


# =============================================================================
# Input Records
# =============================================================================


class Bank(BaseModel):
    """A lender supplying one or more facilities."""

    model_config = ConfigDict(frozen=True)

    bank_id: int = Field(..., description="Unique identifier")
    bank_name: str = Field(..., description="Display name")


class Facility(BaseModel):
    """
    A credit line supplied by a bank.

    available_amount starts equal to amount and only ever decreases, through
    draw_down. Instances are owned by a single allocation run.
    """

    facility_id: int = Field(..., description="Unique identifier")
    bank_id: int = Field(..., description="Owning bank")
    interest_rate: float = Field(..., ge=0, description="Cost of capital")
    amount: int = Field(..., ge=0, description="Total facility size")
    available_amount: Optional[int] = Field(
        None, ge=0, description="Remaining capacity (defaults to amount)"
    )

    @model_validator(mode="after")
    def _default_available_amount(self) -> "Facility":
        if self.available_amount is None:
            self.available_amount = self.amount
        if self.available_amount > self.amount:
            raise ValueError(
                f"available_amount ({self.available_amount}) exceeds amount ({self.amount})"
            )
        return self

    def can_fund(self, requested_amount: int) -> bool:
        """True iff the remaining capacity covers requested_amount."""
        return self.available_amount >= requested_amount

    def draw_down(self, requested_amount: int) -> bool:
        """
        Reduce remaining capacity by requested_amount.

        Returns:
            True if the draw-down was applied, False (state unchanged) if the
            facility cannot fund the amount

        Raises:
            ValueError: If requested_amount is negative
        """
        if requested_amount < 0:
            raise ValueError(f"Cannot draw down a negative amount (got {requested_amount})")
        if not self.can_fund(requested_amount):
            return False
        self.available_amount -= requested_amount
        return True

    def reset_capacity(self) -> None:
        """Restore available_amount to the full facility amount."""
        self.available_amount = self.amount


class Covenant(BaseModel):
    """
    An eligibility constraint attached to a bank.

    facility_id=None scopes the covenant to every facility of the bank.
    max_default_likelihood=None leaves default likelihood unconstrained.
    banned_state=None means no state is banned.
    """

    model_config = ConfigDict(frozen=True)

    bank_id: int = Field(..., description="Owning bank")
    facility_id: Optional[int] = Field(None, description="Facility scope (None = bank-wide)")
    max_default_likelihood: Optional[float] = Field(
        None, ge=0, le=1, description="Ceiling on loan default likelihood"
    )
    banned_state: Optional[str] = Field(None, description="Loan state this covenant excludes")


class Loan(BaseModel):
    """A loan request to be funded by exactly one facility."""

    model_config = ConfigDict(frozen=True)

    loan_id: int = Field(..., description="Unique identifier")
    amount: int = Field(..., ge=0, description="Requested principal")
    interest_rate: float = Field(..., ge=0, description="Loan interest rate")
    default_likelihood: float = Field(
        ..., ge=0, le=1, description="Probability the borrower defaults"
    )
    state: str = Field(..., description="Jurisdiction code (e.g., 'CA')")


# =============================================================================
# Results
# =============================================================================


class FundingDetails(BaseModel):
    """A funded loan: which facility funded it and the expected yield."""

    model_config = ConfigDict(frozen=True)

    loan_id: int
    facility_id: int
    expected_yield: float = Field(..., description="May be negative")


class Assignment(BaseModel):
    """One row of the loan-to-facility assignment report."""

    model_config = ConfigDict(frozen=True)

    loan_id: int
    facility_id: int


class FacilityYield(BaseModel):
    """One row of the yield report: total rounded yield for a facility."""

    model_config = ConfigDict(frozen=True)

    facility_id: int
    expected_yield: int


class UnfundedLoan(BaseModel):
    """A loan the engine could not place, with the reason."""

    model_config = ConfigDict(frozen=True)

    loan_id: int
    reason: UnfundedReason


class AllocationOutcome(BaseModel):
    """
    Full outcome of one allocation pass.

    funded preserves input loan order; unfunded loans appear only in unfunded.
    """

    funded: list[FundingDetails] = Field(default_factory=list)
    unfunded: list[UnfundedLoan] = Field(default_factory=list)


class InputRecords(BaseModel):
    """The four record collections consumed by a run."""

    banks: list[Bank] = Field(default_factory=list)
    facilities: list[Facility] = Field(default_factory=list)
    covenants: list[Covenant] = Field(default_factory=list)
    loans: list[Loan] = Field(default_factory=list)


# =============================================================================
# API Models
# =============================================================================


class AllocationRequest(InputRecords):
    """Request body for POST /api/allocations."""

    facilities: list[Facility] = Field(..., min_length=1)
    loans: list[Loan] = Field(..., min_length=1)


class AllocationResponse(BaseModel):
    """Response body for allocation runs."""

    run_id: str = Field(..., description="Run identifier (UUID4)")
    funding_details: list[FundingDetails] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    yields: list[FacilityYield] = Field(default_factory=list)
    unfunded: list[UnfundedLoan] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO format timestamp")


class ErrorResponse(BaseModel):
    """Error response body for API errors."""

    error: str = Field(..., description="Short error description")
    detail: Optional[str] = Field(None, description="Detailed error message")
    code: str = Field(..., description="Error code (e.g., 'VALIDATION_ERROR')")
