"""
Configuration for the loan allocator.

All configurable parameters live here - file names, eligibility policy
switches and logging level. Passed explicitly rather than hardcoded.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class AllocatorConfig(BaseModel):
    """
    All configurable parameters for an allocation run.

    Passed explicitly to the engine, loader and reporter. Enables unit
    testing with controlled parameters and alternate file layouts.
    """

    # Input files, resolved against the input directory
    banks_filename: str = Field(default="banks.csv", description="Bank records")
    facilities_filename: str = Field(default="facilities.csv", description="Facility records")
    covenants_filename: str = Field(default="covenants.csv", description="Covenant records")
    loans_filename: str = Field(default="loans.csv", description="Loan records")

    # Output files, written to the working directory
    yields_filename: str = Field(default="yields.csv", description="Yield-by-facility report")
    assignments_filename: str = Field(
        default="assignments.csv", description="Loan-to-facility assignment report"
    )

    # Eligibility policy
    reject_banks_without_covenants: bool = Field(
        default=True,
        description="A bank with no covenant rows can fund nothing (False = unconstrained)",
    )

    log_level: str = Field(default="WARNING", description="Root logging level for the CLI")


DEFAULT_ALLOCATOR_CONFIG = AllocatorConfig()


def config_from_env(base: Optional[AllocatorConfig] = None) -> AllocatorConfig:
    """
    Apply environment overrides to a config.

    Recognized variables:
        LOG_LEVEL: overrides log_level
        ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS: "1"/"true" treats banks
            with no covenant rows as unconstrained
    """
    config = base or DEFAULT_ALLOCATOR_CONFIG
    updates: dict = {}

    log_level = os.environ.get("LOG_LEVEL")
    if log_level:
        updates["log_level"] = log_level.upper()

    allow = os.environ.get("ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS")
    if allow is not None:
        updates["reject_banks_without_covenants"] = allow.strip().lower() not in (
            "1",
            "true",
            "yes",
        )

    return config.model_copy(update=updates)
