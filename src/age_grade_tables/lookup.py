"""
age_grade_tables/lookup.py - Factor Lookup

Two ways to resolve an age-grade factor:

1. Range scan: ``get_factor_by_age_and_gender`` walks the table in order.
   O(n) per call, no setup. First matching entry wins.

2. Lookup index: ``build_lookup_index`` expands every range into direct
   (gender, age) -> factor keys once; ``query_index`` is then O(1).
   Later entries overwrite earlier ones on duplicate keys (last write
   wins), so on overlapping tables the two paths disagree. Built-in
   tables never overlap (they are validated at import).

Absent factors are ``None`` (NaN in vectorized results). Presence is
always checked explicitly so a stored 0.0 is never mistaken for absent.

Author: Age Grade Tables Project
License: MIT
"""

import numpy as np
import pandas as pd
import numbers
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging

from .entries import as_range_entry

logger = logging.getLogger(__name__)


IndexKey = Tuple[str, int]


def get_factor_by_age_and_gender(table: Iterable[Any], gender: str, age: int) -> Optional[float]:
    """
    Get the age-grade factor for a gender and age by scanning a range table.

    Args:
        table: Range table in either encoding ([gender, start, end, factor]
               entries or {gender, start, end, factor} records)
        gender: Gender to match (e.g. 'M' or 'F')
        age: Age to match (inclusive between start and end)

    Returns:
        Factor of the first matching entry, otherwise None
    """
    if not isinstance(age, numbers.Real):
        return None
    for raw in table:
        entry = as_range_entry(raw)
        if entry.covers(gender, age):
            return entry.factor
    return None


class LookupIndex:
    """
    Read-only (gender, age) -> factor index for O(1) lookups.

    Keeps two views of the same data:
    - a key mapping for scalar lookups
    - a dense (gender x age) matrix for vectorized lookups, NaN where no
      range covers the cell

    Attributes:
        min_age: Smallest indexed age
        max_age: Largest indexed age
    """

    def __init__(self, factors: Mapping[IndexKey, float]):
        self._factors = MappingProxyType(dict(factors))
        self._gender_codes = {
            gender: code for code, gender in enumerate(dict.fromkeys(g for g, _ in self._factors))
        }

        if self._factors:
            ages = [age for _, age in self._factors]
            self.min_age, self.max_age = min(ages), max(ages)
        else:
            self.min_age, self.max_age = 0, -1

        width = self.max_age - self.min_age + 1
        self._matrix = np.full((len(self._gender_codes), width), np.nan, dtype=np.float64)
        for (gender, age), factor in self._factors.items():
            self._matrix[self._gender_codes[gender], age - self.min_age] = factor
        self._matrix.setflags(write=False)

    def __len__(self) -> int:
        return len(self._factors)

    def __contains__(self, key) -> bool:
        return key in self._factors

    def __repr__(self) -> str:
        return (f"LookupIndex(keys={len(self)}, genders={self.genders}, "
                f"ages={self.min_age}-{self.max_age})")

    @property
    def genders(self) -> List[str]:
        return list(self._gender_codes)

    @property
    def factors(self) -> Mapping[IndexKey, float]:
        """Read-only view of the key mapping."""
        return self._factors

    @property
    def matrix(self) -> np.ndarray:
        """Read-only (gender, age - min_age) factor matrix."""
        return self._matrix

    def get(self, gender: str, age: int) -> Optional[float]:
        """Factor for (gender, age), or None when the key is not indexed."""
        key = (gender, age)
        if key in self._factors:
            return self._factors[key]
        return None

    def query_many(self, genders: Sequence[str], ages: Sequence[Any]) -> np.ndarray:
        """
        Vectorized lookup for parallel gender/age sequences.

        Only real numbers count as ages. Strings (even "35"), None, non-integer
        ages and unknown genders yield NaN, matching ``get`` returning None
        for the same inputs.

        Returns:
            float64 array of factors, NaN where absent
        """
        gender_idx = pd.Series(np.asarray(genders, dtype=object)).map(self._gender_codes)
        gender_idx = gender_idx.astype(np.float64).to_numpy()
        ages_obj = pd.Series(np.asarray(ages, dtype=object))
        is_number = ages_obj.map(lambda a: isinstance(a, numbers.Real)).astype(bool)
        ages_arr = pd.to_numeric(ages_obj.where(is_number), errors='coerce')
        ages_arr = ages_arr.astype(np.float64).to_numpy()

        if len(gender_idx) != len(ages_arr):
            raise ValueError(f"genders and ages differ in length: {len(gender_idx)} != {len(ages_arr)}")

        result = np.full(len(ages_arr), np.nan, dtype=np.float64)
        offsets = ages_arr - self.min_age
        valid = (
            ~np.isnan(gender_idx)
            & ~np.isnan(ages_arr)
            & (np.floor(ages_arr) == ages_arr)
            & (offsets >= 0)
            & (offsets < self._matrix.shape[1])
        )
        result[valid] = self._matrix[gender_idx[valid].astype(int), offsets[valid].astype(int)]
        return result


def build_lookup_index(table: Iterable[Any]) -> LookupIndex:
    """
    Expand a range table into a ``LookupIndex``.

    Every integer age in [start, end] of every entry becomes a key. When
    two entries produce the same key the later one wins.

    Args:
        table: Range table in either encoding

    Returns:
        Immutable lookup index; build once and share
    """
    factors: Dict[IndexKey, float] = {}
    overwritten = 0

    for raw in table:
        entry = as_range_entry(raw)
        for age in range(entry.start, entry.end + 1):
            key = (entry.gender, age)
            if key in factors:
                overwritten += 1
            factors[key] = entry.factor

    if overwritten:
        logger.warning(f"Overlapping ranges: {overwritten} (gender, age) key(s) overwritten "
                       f"by later entries while building lookup index")

    index = LookupIndex(factors)
    logger.info(f"LookupIndex built: {len(index)} keys, genders={index.genders}, "
                f"ages {index.min_age}-{index.max_age}")
    return index


def query_index(index: LookupIndex, gender: str, age: int) -> Optional[float]:
    """
    Get the age-grade factor for a single athlete from a pre-built index.

    Returns:
        Factor, or None if (gender, age) is not indexed
    """
    return index.get(gender, age)
