"""Dealer directory models and dealer feed status."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from lotfinder.models._base import LotFinderBaseModel


class DealerStatus(StrEnum):
    """Advisory health of a selected dealer's inventory feed.

    ``idle -> checking`` on selection of a dealer with a feed,
    ``checking -> online | error`` when the probe completes,
    any state ``-> idle`` when the dealer input changes.
    """

    IDLE = "idle"
    CHECKING = "checking"
    ONLINE = "online"
    ERROR = "error"


class Dealer(LotFinderBaseModel):
    """A directory entry. ``website`` is the feed identifier for the catalog API."""

    name: str = Field(validation_alias=AliasChoices("dealer_name", "name"))
    website: str | None = None

    @field_validator("name", "website", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @property
    def has_feed(self) -> bool:
        """Whether the dealer can be queried in the catalog."""
        return bool(self.website)


class NoInventoryInfo(BaseModel):
    """Terminal state of a search whose feed reported zero listings. Not an error."""

    model_config = ConfigDict(frozen=True)

    dealer_name: str
    feed_identifier: str
    dealer_website: str | None = None
    query_url: str
