"""lotfinder - Async dealer inventory search within a budget."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("lotfinder")
except PackageNotFoundError:
    __version__ = "0+local"
from lotfinder._api.remote_config import fetch_remote_config
from lotfinder.client import LotFinderClient
from lotfinder.config import LotFinderConfig
from lotfinder.dealers import DealerResolver, DealerStatusProbe, DealerSuggestions
from lotfinder.exceptions import (
    CatalogRequestFailedError,
    DealerNotFoundError,
    DirectoryRequestFailedError,
    InvalidSearchError,
    LotFinderConfigError,
    LotFinderError,
    LotFinderTransportError,
)
from lotfinder.inventory import InventoryAggregator, apply_budget
from lotfinder.models import (
    Dealer,
    DealerStatus,
    FilterOptions,
    Filters,
    InventoryResult,
    NoInventoryInfo,
    SearchOutcome,
    SkippedPage,
    Vehicle,
)
from lotfinder.session import SearchSession

__all__ = [
    "__version__",
    "CatalogRequestFailedError",
    "Dealer",
    "DealerNotFoundError",
    "DealerResolver",
    "DealerStatus",
    "DealerStatusProbe",
    "DealerSuggestions",
    "DirectoryRequestFailedError",
    "FilterOptions",
    "Filters",
    "InvalidSearchError",
    "InventoryAggregator",
    "InventoryResult",
    "LotFinderClient",
    "LotFinderConfig",
    "LotFinderConfigError",
    "LotFinderError",
    "LotFinderTransportError",
    "NoInventoryInfo",
    "SearchOutcome",
    "SearchSession",
    "SkippedPage",
    "Vehicle",
    "apply_budget",
    "fetch_remote_config",
]
