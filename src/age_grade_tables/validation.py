"""
age_grade_tables/validation.py - Range Table Validation

Structural checks for piecewise range tables:
- start >= 0 and end >= start for every entry
- factor is a positive finite number
- within one gender, ranges do not overlap and leave no gaps
- each gender spans exactly [min_age, max_age] (0-99 for built-in tables)

Built-in tables are checked once when ``tables`` is imported, so a bad
constant fails fast instead of silently producing a first-match/last-write
discrepancy between the scan and the index.

Author: Age Grade Tables Project
License: MIT
"""

from typing import Any, Dict, Iterable, List, Optional
import math
import logging

from .entries import RangeEntry, as_range_entry
from .exceptions import TableValidationError

logger = logging.getLogger(__name__)


DEFAULT_MIN_AGE = 0
DEFAULT_MAX_AGE = 99


def check_table(table: Iterable[Any],
                min_age: Optional[int] = DEFAULT_MIN_AGE,
                max_age: Optional[int] = DEFAULT_MAX_AGE) -> List[str]:
    """
    Collect every invariant violation in a range table.

    Args:
        table: Entries in either encoding
        min_age: Required first covered age per gender (None to skip)
        max_age: Required last covered age per gender (None to skip)

    Returns:
        Human-readable problem descriptions; empty when the table is valid
    """
    problems = []
    by_gender: Dict[str, List[RangeEntry]] = {}

    for i, raw in enumerate(table):
        entry = as_range_entry(raw)
        if entry.start < 0:
            problems.append(f"entry {i} {tuple(entry)}: negative start age")
        if entry.end < entry.start:
            problems.append(f"entry {i} {tuple(entry)}: end age before start age")
        if not (isinstance(entry.factor, (int, float)) and math.isfinite(entry.factor)
                and entry.factor > 0):
            problems.append(f"entry {i} {tuple(entry)}: factor must be positive and finite")
        by_gender.setdefault(entry.gender, []).append(entry)

    if not by_gender:
        return ["table has no entries"]

    for gender, entries in by_gender.items():
        ordered = sorted(entries, key=lambda e: (e.start, e.end))
        reach = ordered[0].end
        for entry in ordered[1:]:
            if entry.start <= reach:
                problems.append(
                    f"gender {gender!r}: range {entry.start}-{entry.end} overlaps ages up to {reach}"
                )
            elif entry.start > reach + 1:
                problems.append(
                    f"gender {gender!r}: ages {reach + 1}-{entry.start - 1} are not covered"
                )
            reach = max(reach, entry.end)

        first = ordered[0].start
        if min_age is not None and first != min_age:
            problems.append(f"gender {gender!r}: first covered age is {first}, expected {min_age}")
        if max_age is not None and reach != max_age:
            problems.append(f"gender {gender!r}: last covered age is {reach}, expected {max_age}")

    return problems


def validate_table(table: Iterable[Any],
                   min_age: Optional[int] = DEFAULT_MIN_AGE,
                   max_age: Optional[int] = DEFAULT_MAX_AGE,
                   name: Optional[str] = None) -> None:
    """
    Raise ``TableValidationError`` if ``check_table`` finds any problem.
    """
    problems = check_table(table, min_age=min_age, max_age=max_age)
    if problems:
        logger.error(f"Range table {name or '<anonymous>'} is invalid: {len(problems)} problem(s)")
        raise TableValidationError(problems, table_name=name)
