"""
Custom exceptions for the loan allocator.

This module defines exceptions that are distinct from semantic validation
errors and represent unreadable input.
"""


class RecordParseError(Exception):
    """
    Raised when an input record cannot be parsed.

    A missing field, a non-numeric value where a number is expected, or a
    value outside its model bounds all abort the run; there is no per-record
    recovery.

    Attributes:
        path: File the record came from
        line_number: 1-based line number within the file (header is line 1)
        detail: What went wrong
    """

    def __init__(self, path: str, line_number: int, detail: str):
        self.path = path
        self.line_number = line_number
        self.detail = detail
        super().__init__(f"{path}:{line_number}: {detail}")
