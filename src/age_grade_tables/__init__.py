"""
Age Grade Tables

Age-grade factor lookup for triathlon results. Given an athlete's gender
and age, resolve the factor that normalizes a finish time against the open
age group, from one of the built-in range tables.

Usage:
    table = get_table('2025_ironman')
    get_factor_by_age_and_gender(table, 'M', 35)        # 0.98

    index = build_lookup_index(table)                   # build once
    query_index(index, 'F', 35)                         # O(1)
    annotate_bulk(index, athletes)                      # many records

Version: 1.0.0

Author: Age Grade Tables Project
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Age Grade Tables Project"

from .exceptions import (
    AgeGradeError,
    UnknownTableError,
    UnknownFormatError,
    TableValidationError,
)

from .entries import (
    RangeEntry,
    AgeGradeRecord,
    as_range_entry,
)

from .formats import (
    TableFormat,
    convert_table,
    to_named_records,
    from_named_records,
)

from .validation import (
    check_table,
    validate_table,
)

from .tables import (
    TableName,
    get_table,
    resolve_table,
    available_tables,
)

from .lookup import (
    LookupIndex,
    get_factor_by_age_and_gender,
    build_lookup_index,
    query_index,
)

from .config import AnnotatorConfig

from .annotate import (
    BulkAnnotator,
    annotate_bulk,
    annotate_frame,
    age_graded_time,
    normalize_gender,
    create_annotator,
)

__all__ = [
    # Errors
    "AgeGradeError",
    "UnknownTableError",
    "UnknownFormatError",
    "TableValidationError",

    # Entries and formats
    "RangeEntry",
    "AgeGradeRecord",
    "as_range_entry",
    "TableFormat",
    "convert_table",
    "to_named_records",
    "from_named_records",

    # Validation
    "check_table",
    "validate_table",

    # Table store
    "TableName",
    "get_table",
    "resolve_table",
    "available_tables",

    # Lookup
    "LookupIndex",
    "get_factor_by_age_and_gender",
    "build_lookup_index",
    "query_index",

    # Bulk annotation
    "AnnotatorConfig",
    "BulkAnnotator",
    "annotate_bulk",
    "annotate_frame",
    "age_graded_time",
    "normalize_gender",
    "create_annotator",
]
