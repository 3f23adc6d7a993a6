"""
age_grade_tables/tables.py - Built-in Age-Grade Tables

Static age-grade factor tables for triathlon race distances. Each table
is a tuple of RangeEntry(gender, start_age, end_age, factor) covering ages
0-99 for both genders. A factor of 1.000 means "no adjustment"; an age-
graded time is finish_time / factor.

Tables are immutable module constants, validated once at import and
reached through ``resolve_table``/``get_table``. Adding a table means
adding a constant, a ``TableName`` member and a registry entry.

Author: Age Grade Tables Project
License: MIT
"""

from typing import Any, Dict, List, Sequence, Union
from enum import Enum
import logging

from .entries import RangeEntry, Table
from .exceptions import UnknownTableError
from .formats import TableFormat, convert_table
from .validation import validate_table

logger = logging.getLogger(__name__)


class TableName(Enum):
    """Available age-grade tables."""
    IRONMAN_2025 = "2025_ironman"
    IRONMAN_703_2025 = "2025_ironman703"


# =============================================================================
# 2025 IRONMAN (FULL DISTANCE)
# 2.4mi swim, 112mi bike, 26.2mi run
# =============================================================================

AGE_GRADE_2025_IRONMAN: Table = (
    RangeEntry("M", 0, 19, 1.000),
    RangeEntry("M", 20, 24, 0.995),
    RangeEntry("M", 25, 29, 0.990),
    RangeEntry("M", 30, 34, 0.985),
    RangeEntry("M", 35, 39, 0.980),
    RangeEntry("M", 40, 44, 0.975),
    RangeEntry("M", 45, 49, 0.970),
    RangeEntry("M", 50, 54, 0.965),
    RangeEntry("M", 55, 59, 0.960),
    RangeEntry("M", 60, 64, 0.955),
    RangeEntry("M", 65, 69, 0.950),
    RangeEntry("M", 70, 74, 0.945),
    RangeEntry("M", 75, 79, 0.940),
    RangeEntry("M", 80, 84, 0.935),
    RangeEntry("M", 85, 89, 0.930),
    RangeEntry("M", 90, 99, 0.925),
    RangeEntry("F", 0, 19, 1.000),
    RangeEntry("F", 20, 24, 0.995),
    RangeEntry("F", 25, 29, 0.990),
    RangeEntry("F", 30, 34, 0.985),
    RangeEntry("F", 35, 39, 0.980),
    RangeEntry("F", 40, 44, 0.972),
    RangeEntry("F", 45, 49, 0.964),
    RangeEntry("F", 50, 54, 0.956),
    RangeEntry("F", 55, 59, 0.948),
    RangeEntry("F", 60, 64, 0.940),
    RangeEntry("F", 65, 69, 0.932),
    RangeEntry("F", 70, 74, 0.924),
    RangeEntry("F", 75, 79, 0.916),
    RangeEntry("F", 80, 84, 0.908),
    RangeEntry("F", 85, 89, 0.900),
    RangeEntry("F", 90, 99, 0.892),
)


# =============================================================================
# 2025 IRONMAN 70.3 (HALF DISTANCE)
# 1.2mi swim, 56mi bike, 13.1mi run
# =============================================================================

AGE_GRADE_2025_IRONMAN703: Table = (
    RangeEntry("M", 0, 19, 1.000),
    RangeEntry("M", 20, 24, 0.996),
    RangeEntry("M", 25, 29, 0.992),
    RangeEntry("M", 30, 34, 0.988),
    RangeEntry("M", 35, 39, 0.984),
    RangeEntry("M", 40, 44, 0.978),
    RangeEntry("M", 45, 49, 0.972),
    RangeEntry("M", 50, 54, 0.966),
    RangeEntry("M", 55, 59, 0.960),
    RangeEntry("M", 60, 64, 0.954),
    RangeEntry("M", 65, 69, 0.948),
    RangeEntry("M", 70, 74, 0.942),
    RangeEntry("M", 75, 79, 0.936),
    RangeEntry("M", 80, 84, 0.930),
    RangeEntry("M", 85, 89, 0.924),
    RangeEntry("M", 90, 99, 0.918),
    RangeEntry("F", 0, 19, 1.000),
    RangeEntry("F", 20, 24, 0.996),
    RangeEntry("F", 25, 29, 0.992),
    RangeEntry("F", 30, 34, 0.988),
    RangeEntry("F", 35, 39, 0.984),
    RangeEntry("F", 40, 44, 0.976),
    RangeEntry("F", 45, 49, 0.968),
    RangeEntry("F", 50, 54, 0.960),
    RangeEntry("F", 55, 59, 0.952),
    RangeEntry("F", 60, 64, 0.944),
    RangeEntry("F", 65, 69, 0.936),
    RangeEntry("F", 70, 74, 0.928),
    RangeEntry("F", 75, 79, 0.920),
    RangeEntry("F", 80, 84, 0.912),
    RangeEntry("F", 85, 89, 0.904),
    RangeEntry("F", 90, 99, 0.896),
)


_TABLES: Dict[TableName, Table] = {
    TableName.IRONMAN_2025: AGE_GRADE_2025_IRONMAN,
    TableName.IRONMAN_703_2025: AGE_GRADE_2025_IRONMAN703,
}

for _name, _table in _TABLES.items():
    validate_table(_table, name=_name.value)


def resolve_table_name(name: Union[TableName, str]) -> TableName:
    """Map a table identifier to a ``TableName``."""
    if isinstance(name, TableName):
        return name
    try:
        return TableName(name)
    except ValueError:
        raise UnknownTableError(name) from None


def resolve_table(name: Union[TableName, str]) -> Table:
    """
    Resolve a table identifier to its immutable range table.

    Raises:
        UnknownTableError: If ``name`` is not a built-in table
    """
    return _TABLES[resolve_table_name(name)]


def available_tables() -> List[TableName]:
    """All built-in table names, in declaration order."""
    return list(TableName)


def get_table(name: Union[TableName, str],
              fmt: Union[TableFormat, str] = TableFormat.ARRAY
              ) -> Union[Sequence[RangeEntry], List[Dict[str, Any]]]:
    """
    Get an age-grade table by name and format.

    Args:
        name: '2025_ironman' or '2025_ironman703'
        fmt: 'array' for [gender, start, end, factor] entries,
             'json' for {gender, start, end, factor} records

    Returns:
        The table in the requested format

    Raises:
        UnknownTableError: When an unknown table name is provided
        UnknownFormatError: When an unknown format is specified

    Example:
        table = get_table('2025_ironman')
        get_factor_by_age_and_gender(table, 'M', 37)  # 0.98
    """
    return convert_table(resolve_table(name), fmt)
