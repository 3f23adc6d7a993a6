"""
age_grade_tables/exceptions.py - Error Types

Configuration mistakes (bad table name, bad format token, malformed table
data) raise. An athlete whose gender/age has no factor is an expected data
gap and is reported as an absent value, never as an exception.

Author: Age Grade Tables Project
License: MIT
"""

from typing import List, Optional


class AgeGradeError(Exception):
    """Base class for all age_grade_tables errors."""


class UnknownTableError(AgeGradeError, ValueError):
    """Raised when a table name is not one of the built-in tables."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown table name: {name}")


class UnknownFormatError(AgeGradeError, ValueError):
    """Raised when a table format is neither 'array' nor 'json'."""

    def __init__(self, fmt):
        self.format = fmt
        super().__init__(f"Unknown format: {fmt}")


class TableValidationError(AgeGradeError, ValueError):
    """Raised when a range table breaks its structural invariants."""

    def __init__(self, problems: List[str], table_name: Optional[str] = None):
        self.problems = list(problems)
        self.table_name = table_name
        label = f"Table {table_name!r}" if table_name else "Table"
        detail = "; ".join(self.problems)
        super().__init__(f"{label} failed validation: {detail}")
