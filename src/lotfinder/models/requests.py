"""Pydantic request/outcome models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lotfinder.models.catalog import SkippedPage
from lotfinder.models.dealer import Dealer, NoInventoryInfo
from lotfinder.models.vehicle import Vehicle

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_amount(value: Any) -> int:
    """Parse a qualified amount as typed (``"$25,000"``) into whole dollars.

    Only digits are kept, so currency symbols and separators are ignored.
    Returns ``0`` when nothing numeric remains.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    digits = _NON_DIGITS.sub("", str(value or ""))
    return int(digits) if digits else 0


class SearchRequest(BaseModel):
    """A submitted inventory search."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    dealer_name: str
    qualified_amount: int

    @field_validator("dealer_name")
    @classmethod
    def _name_non_empty(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("Please enter a dealership name.")
        return name

    @field_validator("qualified_amount", mode="before")
    @classmethod
    def _amount_positive(cls, value: Any) -> int:
        amount = parse_amount(value)
        if amount <= 0:
            raise ValueError("Please enter a valid qualified amount.")
        return amount


class SearchOutcome(BaseModel):
    """Result of one completed search.

    Exactly one of ``vehicles`` (possibly empty) or ``no_inventory`` is
    meaningful: ``no_inventory`` is set only when the feed reported zero
    listings.
    """

    model_config = ConfigDict(frozen=True)

    dealer: Dealer
    vehicles: tuple[Vehicle, ...] = ()
    total_found: int = 0
    retrieved: int = Field(default=0, ge=0)
    """Listings retrieved before the budget cutoff."""
    no_inventory: NoInventoryInfo | None = None
    skipped_pages: tuple[SkippedPage, ...] = ()
