"""Client-side filter values and the option sets offered for them."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from lotfinder.ingestion.normalize import safe_int, safe_str


class Filters(BaseModel):
    """Refinement applied to the current result collection.

    Every field is optional; an unset field places no constraint. Values are
    accepted the way a form submits them: ``""`` means unset, numeric strings
    are coerced, and a non-positive numeric bound means unset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    year_from: int | None = None
    year_to: int | None = None
    max_mileage: int | None = None
    body_type: str | None = None
    make: str | None = None
    model: str | None = None
    trim: str | None = None

    @field_validator("year_from", "year_to", "max_mileage", mode="before")
    @classmethod
    def _coerce_bound(cls, value: Any) -> int | None:
        parsed = safe_int(value)
        if parsed is None or parsed <= 0:
            return None
        return parsed

    @field_validator("body_type", "make", "model", "trim", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def is_empty(self) -> bool:
        """True when no field constrains the collection."""
        return not any(getattr(self, name) is not None for name in type(self).model_fields)


class FilterOptions(BaseModel):
    """Distinct values present in a result collection, ready for select lists."""

    model_config = ConfigDict(frozen=True)

    years: tuple[int, ...] = ()
    body_types: tuple[str, ...] = ()
    makes: tuple[str, ...] = ()
    models: tuple[str, ...] = ()
    trims: tuple[str, ...] = ()
    mileages: tuple[int, ...] = ()
