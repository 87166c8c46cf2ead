"""Normalized vehicle model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Vehicle(BaseModel):
    """A catalog listing normalized for display and filtering.

    Built by :func:`lotfinder.ingestion.vehicles.normalize_listing`; every
    field either has a safe default or is ``None`` for "unknown".
    """

    model_config = ConfigDict(frozen=True)

    id: str
    """Source listing id, else VIN, else a positional synthetic id."""
    vin: str = "N/A"
    name: str = "Untitled Vehicle"
    """Listing heading."""
    price: float = Field(default=0.0, ge=0)
    """Asking price; ``0`` when the source price is missing or unparseable."""
    miles: int | None = Field(default=None, ge=0)
    """Odometer reading, ``None`` when unknown."""
    estimated_monthly_payment: int = Field(default=0, ge=0)
    """Flat ``price / 60`` approximation, rounded."""
    detail_url: str = "#"
    image_url: str | None = None
    year: int | None = None
    body_type: str | None = None
    make: str | None = None
    model: str | None = None
    trim: str | None = None
