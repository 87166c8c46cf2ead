"""Filter evaluation over a vehicle collection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from lotfinder._constants import ALLOWED_BODY_TYPES, EXCLUDED_TRIM, MILEAGE_OPTIONS
from lotfinder.models.filters import FilterOptions, Filters
from lotfinder.models.vehicle import Vehicle

T = TypeVar("T")

_ALLOWED_BODY_TYPES_LOWER = tuple(body.lower() for body in ALLOWED_BODY_TYPES)


def _distinct(values: Iterable[T | None]) -> set[T]:
    return {value for value in values if value is not None}


def is_listed_body_type(body_type: str) -> bool:
    """Whether *body_type* falls into one of the canonical categories."""
    lowered = body_type.lower()
    return any(allowed in lowered for allowed in _ALLOWED_BODY_TYPES_LOWER)


def available_options(vehicles: Sequence[Vehicle]) -> FilterOptions:
    """Option sets for the filter form, derived from *vehicles*.

    Years sort newest first; body types keep only raw values that contain a
    canonical category; the catch-all "other" trim is never offered.
    """
    body_types = {body for body in _distinct(v.body_type for v in vehicles) if is_listed_body_type(body)}
    trims = {trim for trim in _distinct(v.trim for v in vehicles) if trim.lower() != EXCLUDED_TRIM}
    return FilterOptions(
        years=tuple(sorted(_distinct(v.year for v in vehicles), reverse=True)),
        body_types=tuple(sorted(body_types)),
        makes=tuple(sorted(_distinct(v.make for v in vehicles))),
        models=tuple(sorted(_distinct(v.model for v in vehicles))),
        trims=tuple(sorted(trims)),
        mileages=MILEAGE_OPTIONS,
    )


def matches(vehicle: Vehicle, filters: Filters) -> bool:
    """Whether *vehicle* passes every set field of *filters*.

    Unknown year or mileage never excludes a vehicle.
    """
    if filters.year_from is not None and vehicle.year is not None and vehicle.year < filters.year_from:
        return False
    if filters.year_to is not None and vehicle.year is not None and vehicle.year > filters.year_to:
        return False
    if filters.max_mileage is not None and vehicle.miles is not None and vehicle.miles > filters.max_mileage:
        return False
    if filters.body_type is not None and vehicle.body_type != filters.body_type:
        return False
    if filters.make is not None and vehicle.make != filters.make:
        return False
    if filters.model is not None and vehicle.model != filters.model:
        return False
    return filters.trim is None or vehicle.trim == filters.trim


def apply_filters(vehicles: Sequence[Vehicle], filters: Filters) -> Sequence[Vehicle]:
    """Vehicles passing *filters*, in their original order.

    With no filter set, *vehicles* itself is returned.
    """
    if filters.is_empty:
        return vehicles
    return tuple(vehicle for vehicle in vehicles if matches(vehicle, filters))
