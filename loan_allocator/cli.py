"""
Command-line entry point.

Usage:
    loan-allocator [INPUT_DIR]

Reads banks.csv, facilities.csv, covenants.csv and loans.csv from INPUT_DIR
(default: current directory) and writes yields.csv and assignments.csv to
the current working directory.

Environment Variables:
    LOG_LEVEL: Root logging level (default: WARNING)
    ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS: Treat banks with no covenant
        rows as unconstrained
"""

import argparse
import logging
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from loan_allocator.config import config_from_env
from loan_allocator.exceptions import RecordParseError
from loan_allocator.orchestrator import run_from_directory


logger = logging.getLogger(__name__)

DEFAULT_INPUT_DIR = "."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loan-allocator",
        description="Allocate loans to bank facilities and report expected yields",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "input_dir",
        nargs="?",
        default=DEFAULT_INPUT_DIR,
        help="Directory containing the input CSV files (default: current directory)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    config = config_from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        outcome = run_from_directory(args.input_dir, ".", config)
    except RecordParseError as e:
        logger.error(f"Aborting run, unreadable input: {e}")
        raise

    print(f"Processed {len(outcome.funded)} loan assignments")
    return 0


if __name__ == "__main__":
    sys.exit(main())
