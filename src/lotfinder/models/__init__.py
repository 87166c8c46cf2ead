"""Data models for dealer lookup, catalog inventory and search results."""

from lotfinder.models._base import LotFinderBaseModel
from lotfinder.models.catalog import CatalogPage, InventoryResult, SkippedPage
from lotfinder.models.dealer import Dealer, DealerStatus, NoInventoryInfo
from lotfinder.models.filters import FilterOptions, Filters
from lotfinder.models.requests import SearchOutcome, SearchRequest, parse_amount
from lotfinder.models.vehicle import Vehicle

__all__ = [
    "CatalogPage",
    "Dealer",
    "DealerStatus",
    "FilterOptions",
    "Filters",
    "InventoryResult",
    "LotFinderBaseModel",
    "NoInventoryInfo",
    "SearchOutcome",
    "SearchRequest",
    "SkippedPage",
    "Vehicle",
    "parse_amount",
]
