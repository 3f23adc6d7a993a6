"""
age_grade_tables/annotate.py - Bulk Athlete Annotation

Attaches an age-grade factor to every athlete record in a batch using a
shared, pre-built ``LookupIndex``:

    index = build_lookup_index(get_table('2025_ironman'))
    results = annotate_bulk(index, athletes)

Output order and length always match the input. Input records are never
mutated; each output record is a new dict. A record whose gender/age has no
factor gets ``None`` (NaN for DataFrames); a batch never fails because of
an individual unmatched record.

Author: Age Grade Tables Project
License: MIT
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
import math
import time

from .config import AnnotatorConfig, load_config
from .lookup import LookupIndex, build_lookup_index
from .tables import resolve_table

logger = logging.getLogger(__name__)


GENDER_ALIASES = {
    'm': 'M', 'male': 'M', 'man': 'M',
    'f': 'F', 'female': 'F', 'woman': 'F',
}


def normalize_gender(value: Any) -> Any:
    """Map common gender spellings to 'M'/'F'; anything else passes through."""
    if isinstance(value, str):
        return GENDER_ALIASES.get(value.strip().lower(), value)
    return value


def age_graded_time(finish_time: Optional[float], factor: Optional[float]) -> Optional[float]:
    """
    Age-graded time = finish_time / factor.

    Returns None when either input is absent (None or NaN).
    """
    if finish_time is None or factor is None:
        return None
    if any(isinstance(v, float) and math.isnan(v) for v in (finish_time, factor)):
        return None
    return finish_time / factor


def annotate_bulk(index: LookupIndex,
                  records: Iterable[Mapping[str, Any]],
                  *,
                  gender_field: str = "gender",
                  age_field: str = "age",
                  factor_field: str = "factor") -> List[Dict[str, Any]]:
    """
    Process many athletes using a pre-built lookup index.

    Args:
        index: Index from ``build_lookup_index``
        records: Athlete mappings with at least gender and age
        gender_field: Key holding the gender token
        age_field: Key holding the integer age
        factor_field: Key written on each output record

    Returns:
        New records with all original fields plus the factor (None if absent)
    """
    return [
        {**record, factor_field: index.get(record.get(gender_field), record.get(age_field))}
        for record in records
    ]


def annotate_frame(index: LookupIndex,
                   frame: pd.DataFrame,
                   *,
                   gender_field: str = "gender",
                   age_field: str = "age",
                   factor_field: str = "factor") -> pd.DataFrame:
    """
    Vectorized ``annotate_bulk`` for a DataFrame of athletes.

    Returns:
        A copy of ``frame`` with a float factor column (NaN where absent)

    Raises:
        ValueError: If the gender or age column is missing
    """
    missing = [c for c in (gender_field, age_field) if c not in frame.columns]
    if missing:
        raise ValueError(f"Athlete frame missing required columns: {missing}")

    result = frame.copy()
    result[factor_field] = index.query_many(frame[gender_field], frame[age_field])
    return result


class BulkAnnotator:
    """
    Configured annotator bound to one table.

    Builds the lookup index once at construction; ``annotate`` and
    ``annotate_frame`` can then be called any number of times. The index is
    read-only, so one annotator may be shared across threads.
    """

    def __init__(self, config: AnnotatorConfig, index: Optional[LookupIndex] = None):
        self.config = config
        self.index = index if index is not None else build_lookup_index(resolve_table(config.table))
        logger.info(f"BulkAnnotator initialized: table={config.table.value}, "
                    f"normalize_gender={config.normalize_gender}")

    def _gender(self, value: Any) -> Any:
        return normalize_gender(value) if self.config.normalize_gender else value

    def factor_for(self, gender: Any, age: Any) -> Optional[float]:
        """Factor for a single athlete, after optional gender normalization."""
        return self.index.get(self._gender(gender), age)

    def annotate(self, records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Annotate athlete mappings; see ``annotate_bulk``."""
        cfg = self.config
        start = time.time()

        annotated = []
        for record in records:
            factor = self.factor_for(record.get(cfg.gender_field), record.get(cfg.age_field))
            out = {**record, cfg.factor_field: factor}
            if cfg.time_field is not None:
                out[cfg.graded_time_field] = age_graded_time(record.get(cfg.time_field), factor)
            annotated.append(out)

        matched = sum(1 for r in annotated if r[cfg.factor_field] is not None)
        logger.debug(f"Annotated {len(annotated):,} records ({matched:,} matched) "
                     f"in {time.time() - start:.3f}s")
        return annotated

    def annotate_frame(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Annotate a DataFrame of athletes; see ``annotate_frame``."""
        cfg = self.config
        start = time.time()

        normalized = cfg.normalize_gender and cfg.gender_field in frame.columns
        source = frame
        if normalized:
            source = frame.assign(**{cfg.gender_field: frame[cfg.gender_field].map(normalize_gender)})

        result = annotate_frame(self.index, source,
                                gender_field=cfg.gender_field,
                                age_field=cfg.age_field,
                                factor_field=cfg.factor_field)
        if normalized:
            # Original gender tokens pass through unchanged
            result[cfg.gender_field] = frame[cfg.gender_field]

        if cfg.time_field is not None:
            if cfg.time_field not in frame.columns:
                raise ValueError(f"Athlete frame missing time column: {cfg.time_field!r}")
            times = pd.to_numeric(frame[cfg.time_field], errors='coerce').to_numpy(dtype=np.float64)
            result[cfg.graded_time_field] = times / result[cfg.factor_field].to_numpy()

        matched = int(result[cfg.factor_field].notna().sum())
        logger.debug(f"Annotated frame of {len(result):,} rows ({matched:,} matched) "
                     f"in {time.time() - start:.3f}s")
        return result


def create_annotator(config: Union[AnnotatorConfig, Dict[str, Any], None] = None) -> BulkAnnotator:
    """
    Factory function to create a configured bulk annotator.

    Args:
        config: ``AnnotatorConfig`` or dict of its fields, e.g.
                {'table': '2025_ironman703', 'time_field': 'finish_time'}

    Returns:
        BulkAnnotator with its lookup index already built
    """
    return BulkAnnotator(load_config(config))
