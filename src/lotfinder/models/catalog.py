"""Catalog inventory API response models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from lotfinder.ingestion.normalize import non_negative_or_zero
from lotfinder.models._base import LotFinderBaseModel


class CatalogPage(LotFinderBaseModel):
    """One page of the dealer inventory endpoint.

    ``listings`` are kept as raw records; normalization happens later and
    never fails, whereas validating listing shapes here could.
    """

    total_found: int = Field(default=0, validation_alias=AliasChoices("num_found", "total_found"))
    listings: list[dict[str, Any]] = Field(default_factory=list)
    error_message: str | None = None
    query_url: str = ""

    @field_validator("total_found", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        return non_negative_or_zero(value) or 0

    @field_validator("listings", mode="before")
    @classmethod
    def _keep_records(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @classmethod
    def from_response(cls, payload: Any, *, query_url: str) -> CatalogPage:
        """Build a page from a decoded response body."""
        if not isinstance(payload, dict):
            return cls(query_url=query_url)
        values = dict(payload)
        error = values.get("error")
        if isinstance(error, dict) and error.get("message"):
            values["error_message"] = str(error["message"])
        values["query_url"] = query_url
        return cls.model_validate(values)


class SkippedPage(BaseModel):
    """A page after the first that failed and was left out of the result."""

    model_config = ConfigDict(frozen=True)

    page: int
    start: int
    query_url: str
    reason: str


class InventoryResult(BaseModel):
    """Raw listings merged from every page fetched in one aggregation run.

    Best effort: ``skipped_pages`` lists pages that failed, and at most
    ``max_pages`` pages are ever requested, so ``len(listings)`` can be
    below ``total_found``.
    """

    model_config = ConfigDict(frozen=True)

    listings: tuple[dict[str, Any], ...] = ()
    total_found: int = 0
    pages_requested: int = 0
    skipped_pages: tuple[SkippedPage, ...] = ()
    query_url: str = ""

    @property
    def is_complete(self) -> bool:
        return not self.skipped_pages and len(self.listings) >= self.total_found
