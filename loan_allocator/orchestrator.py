"""
Run orchestration for the loan allocator.

Wires loader, engine and reporter into one batch run:

    load records -> prepare facilities -> allocate -> report

A run is all-or-nothing: any load failure aborts before anything is written.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from loan_allocator.config import DEFAULT_ALLOCATOR_CONFIG, AllocatorConfig
from loan_allocator.engine import (
    DefaultExpectedYieldStrategy,
    ExpectedYieldStrategy,
    allocate_with_diagnostics,
    group_covenants_by_bank,
    prepare_facilities,
)
from loan_allocator.loader import load_inputs
from loan_allocator.models import AllocationOutcome, InputRecords
from loan_allocator.reporting import CsvFundingReporter, FundingReporter


logger = logging.getLogger(__name__)


def run_allocation(
    records: InputRecords,
    yield_strategy: Optional[ExpectedYieldStrategy] = None,
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> AllocationOutcome:
    """
    Allocate one set of records.

    Facilities are copied before allocation, so the caller's records keep
    their capacity and re-running over the same records gives the same result.

    Args:
        records: Loaded banks, facilities, covenants and loans
        yield_strategy: Yield model (default: DefaultExpectedYieldStrategy)
        config: Engine configuration

    Returns:
        AllocationOutcome for the run
    """
    strategy = yield_strategy or DefaultExpectedYieldStrategy()

    facilities = prepare_facilities(
        [f.model_copy() for f in records.facilities],
        records.banks,
    )
    covenants_by_bank = group_covenants_by_bank(records.covenants)

    logger.info(
        f"Allocating {len(records.loans)} loans across {len(facilities)} facilities "
        f"({len(covenants_by_bank)} banks with covenants)"
    )
    return allocate_with_diagnostics(
        records.loans, facilities, covenants_by_bank, strategy, config
    )


def run_from_directory(
    input_dir: Union[str, Path],
    output_dir: Union[str, Path] = ".",
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
    reporter: Optional[FundingReporter] = None,
    yield_strategy: Optional[ExpectedYieldStrategy] = None,
) -> AllocationOutcome:
    """
    Load inputs from input_dir, allocate, and write both reports.

    Args:
        input_dir: Directory holding the four input CSV files
        output_dir: Where reports are written when no reporter is given
        config: File names and engine configuration
        reporter: Report sink (default: CsvFundingReporter in output_dir)
        yield_strategy: Yield model (default: DefaultExpectedYieldStrategy)

    Returns:
        AllocationOutcome for the run
    """
    records = load_inputs(input_dir, config)
    outcome = run_allocation(records, yield_strategy, config)

    if reporter is None:
        out = Path(output_dir)
        reporter = CsvFundingReporter(
            yields_path=out / config.yields_filename,
            assignments_path=out / config.assignments_filename,
        )
    reporter.report(outcome.funded)

    return outcome
