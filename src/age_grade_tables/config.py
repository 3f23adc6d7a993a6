"""
age_grade_tables/config.py - Annotator Configuration

Pydantic model describing how a ``BulkAnnotator`` reads athlete records:
which table to use, which fields hold gender/age/finish time, and where to
write results. Factory functions accept either this model or a plain dict.

Author: Age Grade Tables Project
License: MIT
"""

from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, field_validator
import logging

from .tables import TableName, resolve_table_name

logger = logging.getLogger(__name__)


class AnnotatorConfig(BaseModel):
    """Bulk annotation settings."""
    table: TableName = TableName.IRONMAN_2025

    # Athlete record field names
    gender_field: str = "gender"
    age_field: str = "age"
    factor_field: str = "factor"

    # Optional finish time (seconds) -> age-graded time
    time_field: Optional[str] = Field(
        default=None,
        description="Field holding the raw finish time; enables age-graded time output"
    )
    graded_time_field: str = "age_graded_time"

    # Map 'm', 'Male', 'f', 'female' ... onto the table's 'M'/'F' tokens
    normalize_gender: bool = False

    @field_validator("table", mode="before")
    @classmethod
    def known_table(cls, v):
        return resolve_table_name(v)


def load_config(config: Union[AnnotatorConfig, Dict[str, Any], None] = None) -> AnnotatorConfig:
    """Build an ``AnnotatorConfig`` from a dict (or pass one through)."""
    if config is None:
        return AnnotatorConfig()
    if isinstance(config, AnnotatorConfig):
        return config
    return AnnotatorConfig(**config)
