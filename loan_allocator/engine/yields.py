"""
Expected yield models.

The allocation loop only sees the ExpectedYieldStrategy protocol, so
alternate pricing or risk models can be swapped in without touching it.
"""

from typing import Protocol, runtime_checkable

from loan_allocator.models import Facility, Loan


@runtime_checkable
class ExpectedYieldStrategy(Protocol):
    """
    Protocol defining a yield model.

    Implementations must be pure: no side effects on the loan or facility.
    """

    def calculate(self, loan: Loan, facility: Facility) -> float:
        """
        Compute the expected yield of funding loan from facility.

        Args:
            loan: The funded loan
            facility: The facility funding it

        Returns:
            Expected yield in currency units (may be negative)
        """
        ...


class DefaultExpectedYieldStrategy:
    """
    Probability-weighted interest income, minus expected default loss,
    minus the facility's cost of capital, all scaled by principal.
    """

    def calculate(self, loan: Loan, facility: Facility) -> float:
        p = loan.default_likelihood
        principal = loan.amount
        return (
            (1 - p) * loan.interest_rate * principal
            - p * principal
            - facility.interest_rate * principal
        )
