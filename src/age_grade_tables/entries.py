"""
age_grade_tables/entries.py - Range Entry Types

A range table is an ordered sequence of piecewise entries:

    (gender, start_age, end_age, factor)

meaning "an athlete of this gender aged start..end inclusive has this
age-grade factor". Two encodings exist:

- Compact: the 4-tuple ``RangeEntry`` (canonical, used internally)
- Named:   ``{"gender", "start", "end", "factor"}`` records, used at the
           serialization boundary and validated with ``AgeGradeRecord``

Author: Age Grade Tables Project
License: MIT
"""

from typing import Any, Dict, Mapping, NamedTuple, Sequence, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator
import logging

logger = logging.getLogger(__name__)


NAMED_FIELDS = ("gender", "start", "end", "factor")


class RangeEntry(NamedTuple):
    """Compact range entry. Being a tuple, it is its own array encoding."""
    gender: str
    start: int
    end: int
    factor: float

    def covers(self, gender: str, age) -> bool:
        """True when this entry applies to the given gender and age."""
        return self.gender == gender and self.start <= age <= self.end

    def to_record(self) -> Dict[str, Any]:
        """Field-named form of this entry."""
        return dict(zip(NAMED_FIELDS, self))


Table = Tuple[RangeEntry, ...]


class AgeGradeRecord(BaseModel):
    """Validated field-named range entry."""
    gender: str = Field(..., min_length=1)
    start: int = Field(..., ge=0, description="First age covered (inclusive)")
    end: int = Field(..., ge=0, description="Last age covered (inclusive)")
    factor: float = Field(..., gt=0, description="Age-grade factor; 1.0 = no adjustment")

    @field_validator("factor")
    @classmethod
    def factor_must_be_finite(cls, v: float) -> float:
        if v != v or v in (float("inf"), float("-inf")):
            raise ValueError("factor must be a finite number")
        return v

    @model_validator(mode="after")
    def end_not_before_start(self) -> "AgeGradeRecord":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")
        return self

    def to_entry(self) -> RangeEntry:
        return RangeEntry(self.gender, self.start, self.end, self.factor)


def as_range_entry(entry: Any) -> RangeEntry:
    """
    Convert either encoding of a range entry to a ``RangeEntry``.

    Dispatch is on the type of each entry, so mixed sequences are fine.
    No validation beyond shape happens here; see ``parse_record``.

    Raises:
        TypeError: If the entry is neither a 4-sequence nor a named record.
    """
    if isinstance(entry, RangeEntry):
        return entry
    if isinstance(entry, AgeGradeRecord):
        return entry.to_entry()
    if isinstance(entry, Mapping):
        try:
            return RangeEntry(*(entry[name] for name in NAMED_FIELDS))
        except KeyError as exc:
            raise TypeError(f"Named range entry is missing field {exc.args[0]!r}: {entry!r}") from exc
    if isinstance(entry, Sequence) and not isinstance(entry, str) and len(entry) == 4:
        return RangeEntry(*entry)
    raise TypeError(f"Not a range entry: {entry!r}")


def parse_record(record: Mapping[str, Any]) -> RangeEntry:
    """Validate a named record and return its compact entry."""
    return AgeGradeRecord.model_validate(dict(record)).to_entry()
