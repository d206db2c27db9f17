"""
Allocation algorithm for the loan allocator.

Greedy, single pass, one loan at a time in input order. Facility capacity
is shared mutable state: each draw-down is visible to every later loan.

Key components:
- prepare_facilities: Drops unknown-bank facilities, orders by interest rate
- select_facility: Cheapest facility with capacity and covenants satisfied
- fund: Draws down capacity and prices the loan
- allocate_with_diagnostics: The matching loop, with unfunded reasons
- allocate: The matching loop, funded loans only
"""

import logging
from typing import Iterable, Optional

from loan_allocator.config import DEFAULT_ALLOCATOR_CONFIG, AllocatorConfig
from loan_allocator.engine.covenants import meets_covenants
from loan_allocator.engine.yields import ExpectedYieldStrategy
from loan_allocator.models import (
    AllocationOutcome,
    Bank,
    Covenant,
    Facility,
    FundingDetails,
    Loan,
    UnfundedLoan,
    UnfundedReason,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Run Setup
# =============================================================================


def prepare_facilities(facilities: Iterable[Facility], banks: Iterable[Bank]) -> list[Facility]:
    """
    Restrict facilities to known banks and order them cheapest first.

    The sort is stable, so facilities with equal rates keep input order.
    The returned list holds the same Facility objects, not copies.

    Args:
        facilities: All loaded facilities
        banks: All loaded banks

    Returns:
        Facilities of known banks, ascending by interest_rate
    """
    bank_ids = {bank.bank_id for bank in banks}
    known: list[Facility] = []
    dropped: list[int] = []
    for facility in facilities:
        if facility.bank_id in bank_ids:
            known.append(facility)
        else:
            dropped.append(facility.facility_id)

    if dropped:
        logger.info(f"Dropping {len(dropped)} facilities with unknown banks: {dropped}")

    return sorted(known, key=lambda f: f.interest_rate)


# =============================================================================
# Per-Loan Matching
# =============================================================================


def select_facility(
    loan: Loan,
    facilities: list[Facility],
    covenants_by_bank: dict[int, list[Covenant]],
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> Optional[Facility]:
    """
    Pick the facility that funds a loan.

    Capacity is checked against current state, then covenants are checked
    in rate order; the first facility passing both wins.

    Returns:
        The selected facility, or None if no facility qualifies
    """
    with_capacity = [f for f in facilities if f.can_fund(loan.amount)]
    for facility in with_capacity:
        if meets_covenants(loan, facility, covenants_by_bank, config):
            return facility
    return None


def fund(loan: Loan, facility: Facility, yield_strategy: ExpectedYieldStrategy) -> FundingDetails:
    """Draw down the facility by the loan amount and record the expected yield."""
    facility.draw_down(loan.amount)
    expected_yield = yield_strategy.calculate(loan, facility)
    return FundingDetails(
        loan_id=loan.loan_id,
        facility_id=facility.facility_id,
        expected_yield=expected_yield,
    )


# =============================================================================
# Allocation Loop
# =============================================================================


def allocate_with_diagnostics(
    loans: Iterable[Loan],
    facilities: list[Facility],
    covenants_by_bank: dict[int, list[Covenant]],
    yield_strategy: ExpectedYieldStrategy,
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> AllocationOutcome:
    """
    Allocate loans to facilities, reporting why unfunded loans were skipped.

    Loans are processed strictly in input order; each is fully placed (or
    skipped) before the next. Facilities must already be prepared with
    prepare_facilities.

    Args:
        loans: Loan requests in processing order
        facilities: Prepared facilities (known banks, ascending rate)
        covenants_by_bank: Covenants indexed by bank_id
        yield_strategy: Yield model applied to each funded loan
        config: Engine configuration

    Returns:
        AllocationOutcome with funded loans in input order and unfunded
        loans with a reason code
    """
    funded: list[FundingDetails] = []
    unfunded: list[UnfundedLoan] = []

    for loan in loans:
        facility = select_facility(loan, facilities, covenants_by_bank, config)

        if facility is None:
            if any(f.can_fund(loan.amount) for f in facilities):
                reason = UnfundedReason.COVENANTS_NOT_MET
            else:
                reason = UnfundedReason.INSUFFICIENT_CAPACITY
            logger.debug(f"Loan {loan.loan_id} unfunded ({reason.value})")
            unfunded.append(UnfundedLoan(loan_id=loan.loan_id, reason=reason))
            continue

        details = fund(loan, facility, yield_strategy)
        logger.debug(
            f"Loan {loan.loan_id} funded by facility {facility.facility_id} "
            f"(remaining={facility.available_amount}, yield={details.expected_yield:.2f})"
        )
        funded.append(details)

    logger.info(f"Allocation complete: {len(funded)} funded, {len(unfunded)} unfunded")
    return AllocationOutcome(funded=funded, unfunded=unfunded)


def allocate(
    loans: Iterable[Loan],
    facilities: list[Facility],
    covenants_by_bank: dict[int, list[Covenant]],
    yield_strategy: ExpectedYieldStrategy,
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> list[FundingDetails]:
    """
    Allocate loans to facilities.

    Same loop as allocate_with_diagnostics; unfunded loans are simply absent
    from the result.

    Returns:
        Funding details for funded loans, in input order
    """
    outcome = allocate_with_diagnostics(
        loans, facilities, covenants_by_bank, yield_strategy, config
    )
    return outcome.funded
