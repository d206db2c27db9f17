"""
CSV record loader.

Each input file has a header line (discarded) followed by one record per
line. Column order is fixed per file:

    banks.csv:       bank_id, bank_name
    facilities.csv:  amount, interest_rate, facility_id, bank_id
    covenants.csv:   facility_id, max_default_likelihood, bank_id, banned_state
    loans.csv:       interest_rate, amount, loan_id, default_likelihood, state

Any unreadable record raises RecordParseError; there is no per-record recovery.
"""

import csv
import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar, Union

from loan_allocator.config import DEFAULT_ALLOCATOR_CONFIG, AllocatorConfig
from loan_allocator.exceptions import RecordParseError
from loan_allocator.models import Bank, Covenant, Facility, InputRecords, Loan


logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]


# =============================================================================
# Field Parsers
# =============================================================================


def _optional(value: str) -> Optional[str]:
    value = value.strip()
    return value if value else None


def _optional_int(value: str) -> Optional[int]:
    value = value.strip()
    return int(value) if value else None


def _optional_float(value: str) -> Optional[float]:
    value = value.strip()
    return float(value) if value else None


# =============================================================================
# Record Parsers
# =============================================================================


def parse_bank(values: list[str]) -> Bank:
    return Bank(bank_id=int(values[0]), bank_name=values[1].strip())


def parse_facility(values: list[str]) -> Facility:
    # amount is written as a decimal and truncated
    return Facility(
        amount=int(float(values[0])),
        interest_rate=float(values[1]),
        facility_id=int(values[2]),
        bank_id=int(values[3]),
    )


def parse_covenant(values: list[str]) -> Covenant:
    return Covenant(
        facility_id=_optional_int(values[0]),
        max_default_likelihood=_optional_float(values[1]),
        bank_id=int(values[2]),
        banned_state=_optional(values[3]),
    )


def parse_loan(values: list[str]) -> Loan:
    return Loan(
        interest_rate=float(values[0]),
        amount=int(values[1]),
        loan_id=int(values[2]),
        default_likelihood=float(values[3]),
        state=values[4].strip(),
    )


# =============================================================================
# File Loading
# =============================================================================


def load(path: PathLike, parser: Callable[[list[str]], T]) -> list[T]:
    """
    Load every record of a CSV file with the given row parser.

    Blank lines are skipped. Line numbers in errors are 1-based and count
    the header.

    Raises:
        RecordParseError: On a short row, a non-numeric field, or a value
            rejected by model validation
        OSError: If the file cannot be opened
    """
    records: list[T] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        next(reader, None)  # header
        for row in reader:
            if not any(field.strip() for field in row):
                continue
            try:
                records.append(parser(row))
            except IndexError:
                raise RecordParseError(
                    str(path), reader.line_num, f"expected more fields, got {len(row)}"
                ) from None
            except ValueError as e:
                # pydantic.ValidationError is a ValueError
                raise RecordParseError(str(path), reader.line_num, str(e)) from e

    logger.info(f"Loaded {len(records)} records from {path}")
    return records


def load_banks(path: PathLike) -> list[Bank]:
    return load(path, parse_bank)


def load_facilities(path: PathLike) -> list[Facility]:
    return load(path, parse_facility)


def load_covenants(path: PathLike) -> list[Covenant]:
    return load(path, parse_covenant)


def load_loans(path: PathLike) -> list[Loan]:
    return load(path, parse_loan)


def load_inputs(
    input_dir: PathLike,
    config: AllocatorConfig = DEFAULT_ALLOCATOR_CONFIG,
) -> InputRecords:
    """
    Load all four record collections from an input directory.

    Args:
        input_dir: Directory holding the input files
        config: Supplies the file names

    Returns:
        InputRecords with banks, facilities, covenants and loans
    """
    base = Path(input_dir)
    return InputRecords(
        banks=load_banks(base / config.banks_filename),
        facilities=load_facilities(base / config.facilities_filename),
        covenants=load_covenants(base / config.covenants_filename),
        loans=load_loans(base / config.loans_filename),
    )
