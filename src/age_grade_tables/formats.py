"""
age_grade_tables/formats.py - Table Format Converter

Renders a range table as either its native compact sequence ("array") or
as a list of field-named records ("json"). Conversion never alters the
semantic content or the order of the entries.

Author: Age Grade Tables Project
License: MIT
"""

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union
from enum import Enum
import logging

from .entries import RangeEntry, Table, as_range_entry, parse_record
from .exceptions import UnknownFormatError

logger = logging.getLogger(__name__)


class TableFormat(Enum):
    """Output formats for range tables."""
    ARRAY = "array"
    JSON = "json"


def resolve_format(fmt: Union[TableFormat, str]) -> TableFormat:
    """Map a format token to a ``TableFormat``."""
    if isinstance(fmt, TableFormat):
        return fmt
    try:
        return TableFormat(fmt)
    except ValueError:
        raise UnknownFormatError(fmt) from None


def to_named_records(table: Iterable[Any]) -> List[Dict[str, Any]]:
    """Field-named records (gender, start, end, factor), one per entry, in order."""
    return [as_range_entry(entry).to_record() for entry in table]


def from_named_records(records: Iterable[Mapping[str, Any]]) -> Table:
    """
    Validate named records and return the compact table.

    Inverse of ``to_named_records``: converting array -> json -> array
    reproduces the original sequence exactly.
    """
    return tuple(parse_record(record) for record in records)


def convert_table(table: Sequence[RangeEntry],
                  fmt: Union[TableFormat, str] = TableFormat.ARRAY
                  ) -> Union[Sequence[RangeEntry], List[Dict[str, Any]]]:
    """
    Render a table in the requested format.

    Args:
        table: Compact range table
        fmt: 'array' (identity, the same object is returned) or 'json'

    Returns:
        The table itself, or a list of named records

    Raises:
        UnknownFormatError: For any other format token
    """
    fmt = resolve_format(fmt)
    if fmt is TableFormat.ARRAY:
        return table
    return to_named_records(table)
