"""
Input validation for the loan allocator.

All functions are pure and return lists of messages. Pydantic already
enforces field bounds; these checks cover cross-record consistency.

Only duplicate IDs are errors. Referential gaps (a covenant scoped to a
facility that is not present, a blank loan state) are processed normally
by the engine, so they are reported as warnings and logged.
"""

import logging
from typing import Iterable, Optional

from loan_allocator.models import Bank, Covenant, Facility, Loan


logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """
    Raised when input validation fails.

    Attributes:
        errors: List of validation error messages
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "; ".join(errors) if errors else "Validation failed"
        super().__init__(message)


def _duplicates(ids: Iterable[int]) -> list[int]:
    seen = set()
    duplicates = set()
    for record_id in ids:
        if record_id in seen:
            duplicates.add(record_id)
        seen.add(record_id)
    return sorted(duplicates)


# =============================================================================
# Record Validation (errors)
# =============================================================================


def validate_banks(banks: list[Bank]) -> list[str]:
    """Bank IDs must be unique."""
    errors: list[str] = []
    duplicates = _duplicates(b.bank_id for b in banks)
    if duplicates:
        errors.append(f"Bank IDs must be unique; duplicates: {duplicates}")
    return errors


def validate_facilities(facilities: list[Facility]) -> list[str]:
    """Facility IDs must be unique."""
    errors: list[str] = []
    duplicates = _duplicates(f.facility_id for f in facilities)
    if duplicates:
        errors.append(f"Facility IDs must be unique; duplicates: {duplicates}")
    return errors


def validate_loans(loans: list[Loan]) -> list[str]:
    """Loan IDs must be unique."""
    errors: list[str] = []
    duplicates = _duplicates(loan.loan_id for loan in loans)
    if duplicates:
        errors.append(f"Loan IDs must be unique; duplicates: {duplicates}")
    return errors


# =============================================================================
# Referential Gaps (warnings)
# =============================================================================


def covenant_scope_warnings(covenants: list[Covenant], facilities: list[Facility]) -> list[str]:
    """
    Facility-scoped covenants that point at no facility of their bank.

    Such a covenant never applies during allocation.
    """
    warnings: list[str] = []
    facility_banks = {f.facility_id: f.bank_id for f in facilities}

    for covenant in covenants:
        if covenant.facility_id is None:
            continue
        bank_id = facility_banks.get(covenant.facility_id)
        if bank_id is None:
            warnings.append(
                f"Covenant for bank {covenant.bank_id} references unknown "
                f"facility {covenant.facility_id}"
            )
        elif bank_id != covenant.bank_id:
            warnings.append(
                f"Covenant for bank {covenant.bank_id} references facility "
                f"{covenant.facility_id} owned by bank {bank_id}"
            )

    return warnings


def loan_warnings(loans: list[Loan]) -> list[str]:
    """Loans with a blank state; they only match a blank banned state."""
    return [
        f"Loan {loan.loan_id}: state is blank"
        for loan in loans
        if not loan.state or not loan.state.strip()
    ]


# =============================================================================
# Convenience Functions
# =============================================================================


def validate_and_raise(
    banks: Optional[list[Bank]] = None,
    facilities: Optional[list[Facility]] = None,
    covenants: Optional[list[Covenant]] = None,
    loans: Optional[list[Loan]] = None,
) -> list[str]:
    """
    Validate inputs and raise ValidationError if any errors found.

    This is a convenience function for API boundary validation.

    Returns:
        Warnings for referential gaps (already logged)
    """
    all_errors: list[str] = []
    all_warnings: list[str] = []

    if banks is not None:
        all_errors.extend(validate_banks(banks))

    if facilities is not None:
        all_errors.extend(validate_facilities(facilities))
        if covenants is not None:
            all_warnings.extend(covenant_scope_warnings(covenants, facilities))

    if loans is not None:
        all_errors.extend(validate_loans(loans))
        all_warnings.extend(loan_warnings(loans))

    if all_errors:
        raise ValidationError(all_errors)

    for warning in all_warnings:
        logger.warning(warning)
    return all_warnings
