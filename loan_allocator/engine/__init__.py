"""
Engine module for the loan allocator.

Contains pure functions for covenant evaluation, yield computation and the
allocation loop. Nothing here performs I/O.
"""

from loan_allocator.engine.allocator import (
    allocate,
    allocate_with_diagnostics,
    fund,
    prepare_facilities,
    select_facility,
)
from loan_allocator.engine.covenants import (
    applies_to,
    check_covenant,
    group_covenants_by_bank,
    meets_covenants,
)
from loan_allocator.engine.yields import DefaultExpectedYieldStrategy, ExpectedYieldStrategy

__all__ = [
    # Covenants
    "group_covenants_by_bank",
    "applies_to",
    "check_covenant",
    "meets_covenants",
    # Yields
    "ExpectedYieldStrategy",
    "DefaultExpectedYieldStrategy",
    # Allocation
    "prepare_facilities",
    "select_facility",
    "fund",
    "allocate_with_diagnostics",
    "allocate",
]
