"""Search session state: the explicit context one search screen works against."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from lotfinder._constants import RESULTS_PER_PAGE
from lotfinder.models.catalog import SkippedPage
from lotfinder.models.dealer import NoInventoryInfo
from lotfinder.models.filters import FilterOptions, Filters
from lotfinder.models.requests import SearchOutcome
from lotfinder.models.vehicle import Vehicle
from lotfinder.refine.filters import apply_filters, available_options
from lotfinder.refine.pagination import clamp_page, page_count, paginate

_logger = logging.getLogger(__name__)


class SearchSession:
    """Current results plus the filter/page state applied to them.

    Each aggregation run is tagged with a token from :meth:`begin_run`; only
    the run holding the latest token may publish into the session, so a
    slow, superseded run can never overwrite newer results. The vehicle
    collection is replaced wholesale, never mutated in place.
    """

    def __init__(self, *, results_per_page: int = RESULTS_PER_PAGE) -> None:
        if results_per_page <= 0:
            raise ValueError(f"results_per_page must be positive, got {results_per_page}")
        self.results_per_page = results_per_page
        self._run_token = 0
        self._vehicles: tuple[Vehicle, ...] = ()
        self._filters = Filters()
        self._page = 1
        self.no_inventory: NoInventoryInfo | None = None
        self.error: str | None = None
        self.skipped_pages: tuple[SkippedPage, ...] = ()
        self.searched = False
        self.loading = False

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    @property
    def run_token(self) -> int:
        return self._run_token

    def begin_run(self) -> int:
        """Start a new search: clear results, reset filters and page."""
        self._run_token += 1
        self._vehicles = ()
        self._filters = Filters()
        self._page = 1
        self.no_inventory = None
        self.error = None
        self.skipped_pages = ()
        self.searched = True
        self.loading = True
        return self._run_token

    def is_current(self, token: int) -> bool:
        return token == self._run_token

    def finish_run(self, token: int, outcome: SearchOutcome) -> bool:
        """Publish *outcome* if *token* is still the latest run."""
        if not self.is_current(token):
            _logger.debug("Discarding outcome of superseded run token=%d latest=%d", token, self._run_token)
            return False
        self._vehicles = tuple(outcome.vehicles)
        self.no_inventory = outcome.no_inventory
        self.skipped_pages = tuple(outcome.skipped_pages)
        self.loading = False
        return True

    def fail_run(self, token: int, message: str) -> bool:
        """Record *message* as the terminal error if *token* is still the latest run."""
        if not self.is_current(token):
            _logger.debug("Discarding error of superseded run token=%d latest=%d", token, self._run_token)
            return False
        self._vehicles = ()
        self.error = message
        self.loading = False
        return True

    def new_search(self) -> None:
        """Return to the search form; results stay until the next run."""
        self.searched = False

    # ------------------------------------------------------------------
    # Refinement
    # ------------------------------------------------------------------

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return self._vehicles

    @property
    def filters(self) -> Filters:
        return self._filters

    def set_filters(self, filters: Filters) -> None:
        self._filters = filters
        self._page = 1

    def reset_filters(self) -> None:
        self.set_filters(Filters())

    @property
    def options(self) -> FilterOptions:
        return available_options(self._vehicles)

    @property
    def filtered_vehicles(self) -> Sequence[Vehicle]:
        return apply_filters(self._vehicles, self._filters)

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_count(self) -> int:
        return page_count(len(self.filtered_vehicles), self.results_per_page)

    def go_to_page(self, page_number: int) -> int:
        """Move to *page_number*, clamped to the available pages."""
        self._page = clamp_page(page_number, self.page_count)
        return self._page

    @property
    def visible_vehicles(self) -> Sequence[Vehicle]:
        """Vehicles on the current page after filtering."""
        return paginate(self.filtered_vehicles, self.results_per_page, self._page)
