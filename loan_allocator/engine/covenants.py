"""
Covenant evaluation for the loan allocator.

All functions are pure and deterministic.

Key components:
- group_covenants_by_bank: Indexes covenant records by owning bank
- check_covenant: Tests one covenant against one loan
- meets_covenants: Tests every covenant applicable to a facility
"""

import math
from collections import defaultdict
from typing import Iterable

from loan_allocator.config import DEFAULT_ALLOCATOR_CONFIG, AllocatorConfig
from loan_allocator.models import Covenant, Facility, Loan


def group_covenants_by_bank(covenants: Iterable[Covenant]) -> dict[int, list[Covenant]]:
    """Index covenants by bank_id, preserving input order within each bank."""
    by_bank: dict[int, list[Covenant]] = defaultdict(list)
    for covenant in covenants:
        by_bank[covenant.bank_id].append(covenant)
    return dict(by_bank)


def applies_to(covenant: Covenant, facility: Facility) -> bool:
    """A covenant applies when it is bank-wide or scoped to this facility."""
    return covenant.facility_id is None or covenant.facility_id == facility.facility_id


def check_covenant(covenant: Covenant, loan: Loan) -> bool:
    """
    Check a single covenant against a loan.

    The loan fails if its state is the banned state, or if its default
    likelihood exceeds the covenant ceiling (unbounded when unset).
    """
    max_default_likelihood = (
        covenant.max_default_likelihood
        if covenant.max_default_likelihood is not None
        else math.inf
    )
    banned = covenant.banned_state is not None and loan.state == covenant.banned_state
    return not (banned or loan.default_likelihood > max_default_likelihood)


def meets_covenants(
    loan: Loan,
    facility: Facility,
    covenants_by_bank: dict[int, list[Covenant]],
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> bool:
    """
    Decide whether a loan is eligible for a facility.

    A bank with no covenant entry at all is rejected outright unless
    config.reject_banks_without_covenants is False. Otherwise every covenant
    of the bank that applies to this facility must pass; a bank whose
    covenants all target other facilities passes vacuously.

    Args:
        loan: The loan being placed
        facility: Candidate facility
        covenants_by_bank: Covenants indexed by bank_id
        config: Engine configuration

    Returns:
        True if the loan may be funded from this facility
    """
    bank_covenants = covenants_by_bank.get(facility.bank_id)
    if bank_covenants is None:
        return not config.reject_banks_without_covenants

    return all(
        check_covenant(covenant, loan)
        for covenant in bank_covenants
        if applies_to(covenant, facility)
    )
