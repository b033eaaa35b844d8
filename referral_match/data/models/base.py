"""
Base model classes for the matching data models.

Every entity the engine reads is owned by an external store, so models
are lenient: unknown fields are ignored and missing fields fall back to
empty defaults instead of failing validation.
"""

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict


def none_to_list(value: Any) -> Any:
    """Treat an explicit null list as empty."""
    return [] if value is None else value


def none_to_false(value: Any) -> Any:
    """Treat an explicit null flag as unset."""
    return False if value is None else value


def truncate_float(value: Any) -> Any:
    """Drop the fractional part of a finite float, e.g. 5.5 -> 5."""
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return value


# Field types that accept null from the store
StrList = Annotated[list[str], BeforeValidator(none_to_list)]
Flag = Annotated[bool, BeforeValidator(none_to_false)]

# Counts that may arrive fractional from hand-edited config
WholeNumber = Annotated[int, BeforeValidator(truncate_float)]


class EmbeddedModel(BaseModel):
    """
    Base model for nested records (preferences, amenities, metrics).

    Use this for models that only ever appear inside another record.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )


class EntityModel(EmbeddedModel):
    """Base model for top-level records that carry an id from the store."""

    id: str | None = None


class FrozenModel(BaseModel):
    """Immutable value object; updates go through model_copy()."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )
