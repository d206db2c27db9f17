"""
Funding reports.

Two reports are produced per run, each overwritten:

    yields.csv:       facility_id,expected_yield  (summed per facility, rounded)
    assignments.csv:  loan_id,facility_id         (one row per funded loan)
"""

import csv
import logging
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from loan_allocator.models import Assignment, FacilityYield, FundingDetails


logger = logging.getLogger(__name__)

YIELDS_HEADER = ["facility_id", "expected_yield"]
ASSIGNMENTS_HEADER = ["loan_id", "facility_id"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def summarize_yields(funding_details: list[FundingDetails]) -> list[FacilityYield]:
    """
    Sum expected yields per facility.

    Facilities appear in order of their first funded loan; only facilities
    that funded at least one loan are included. Rounding happens after summing.
    """
    totals: dict[int, float] = {}
    for details in funding_details:
        totals[details.facility_id] = totals.get(details.facility_id, 0.0) + details.expected_yield

    return [
        FacilityYield(facility_id=facility_id, expected_yield=round_half_up(total))
        for facility_id, total in totals.items()
    ]


def to_assignments(funding_details: list[FundingDetails]) -> list[Assignment]:
    return [
        Assignment(loan_id=d.loan_id, facility_id=d.facility_id) for d in funding_details
    ]


# =============================================================================
# Reporters
# =============================================================================


class FundingReporter(ABC):
    """Persists the outcome of an allocation run."""

    @abstractmethod
    def report_yields(self, funding_details: list[FundingDetails]) -> None:
        pass

    @abstractmethod
    def report_assignments(self, funding_details: list[FundingDetails]) -> None:
        pass

    def report(self, funding_details: list[FundingDetails]) -> None:
        """Write both reports."""
        self.report_yields(funding_details)
        self.report_assignments(funding_details)


class CsvFundingReporter(FundingReporter):
    """
    Writes the yield and assignment reports as CSV files.

    Existing files are overwritten. Rows end with a bare newline.
    """

    def __init__(self, yields_path: Union[str, Path], assignments_path: Union[str, Path]) -> None:
        self.yields_path = Path(yields_path)
        self.assignments_path = Path(assignments_path)

    def report_yields(self, funding_details: list[FundingDetails]) -> None:
        rows = [[y.facility_id, y.expected_yield] for y in summarize_yields(funding_details)]
        self._write(self.yields_path, YIELDS_HEADER, rows)

    def report_assignments(self, funding_details: list[FundingDetails]) -> None:
        rows = [[a.loan_id, a.facility_id] for a in to_assignments(funding_details)]
        self._write(self.assignments_path, ASSIGNMENTS_HEADER, rows)

    @staticmethod
    def _write(path: Path, header: list[str], rows: list[list]) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(header)
            writer.writerows(rows)
        logger.info(f"Wrote {len(rows)} rows to {path}")
