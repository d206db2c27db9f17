"""Loan-to-facility allocation under bank covenants and facility capacity."""

__version__ = "1.0.0"
