"""High-level async client for dealer inventory search."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp
from pydantic import ValidationError

from lotfinder._api.catalog import fetch_inventory_page, fetch_total_found
from lotfinder._constants import UNEXPECTED_SEARCH_ERROR
from lotfinder._api.directory import RestDealerDirectory
from lotfinder._transport import HttpTransport, Transport
from lotfinder.config import LotFinderConfig
from lotfinder.dealers import DealerDirectory, DealerResolver, DealerStatusProbe, DealerSuggestions
from lotfinder.exceptions import InvalidSearchError, LotFinderError
from lotfinder.ingestion.vehicles import normalize_listings
from lotfinder.inventory import InventoryAggregator, Sleep, apply_budget
from lotfinder.models.catalog import CatalogPage, InventoryResult
from lotfinder.models.dealer import Dealer, DealerStatus, NoInventoryInfo
from lotfinder.models.requests import SearchOutcome, SearchRequest
from lotfinder.session import SearchSession

_logger = logging.getLogger(__name__)


class LotFinderClient:
    """Async client for dealer lookup and inventory search.

    Usage::

        async with LotFinderClient(LotFinderConfig.from_env()) as client:
            outcome = await client.search("Acme Motors", "$25,000")
    """

    def __init__(
        self,
        config: LotFinderConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        directory: DealerDirectory | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._directory = directory
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LotFinderClient:
        self._config.require_complete()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    @property
    def config(self) -> LotFinderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise LotFinderError("Client not initialized. Use 'async with LotFinderClient(...) as client:'")
        return self._transport

    def _resolver(self) -> DealerResolver:
        directory = self._directory or RestDealerDirectory(self._config, self._require_transport())
        return DealerResolver(directory, limit=self._config.suggestion_limit)

    async def _fetch_page(self, source: str, rows: int, start: int) -> CatalogPage:
        return await fetch_inventory_page(self._config, self._require_transport(), source, rows=rows, start=start)

    async def _count_listings(self, source: str) -> int:
        return await fetch_total_found(self._config, self._require_transport(), source)

    def _aggregator(self) -> InventoryAggregator:
        kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return InventoryAggregator(
            self._fetch_page,
            page_size=self._config.page_size,
            max_pages=self._config.max_pages,
            page_delay=self._config.page_delay,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Dealer lookup
    # ------------------------------------------------------------------

    async def suggest_dealers(self, partial_name: str) -> list[Dealer]:
        """Dealers whose name contains *partial_name*; empty on any failure."""
        return await self._resolver().suggest(partial_name)

    async def resolve_dealer(self, name: str) -> Dealer:
        """The dealer exactly named *name*, with a feed identifier."""
        return await self._resolver().resolve(name)

    async def check_dealer(self, dealer: Dealer) -> DealerStatus:
        """One-shot feed probe for *dealer* (no settle delay)."""
        return await self.status_probe().probe(dealer)

    def dealer_suggestions(
        self,
        *,
        on_change: Callable[[list[Dealer]], None] | None = None,
    ) -> DealerSuggestions:
        """Debounced suggestion list bound to this client."""
        return DealerSuggestions(self._resolver(), quiet_period=self._config.quiet_period, on_change=on_change)

    def status_probe(self, *, on_change: Callable[[DealerStatus], None] | None = None) -> DealerStatusProbe:
        """Settle-delayed dealer status probe bound to this client."""
        return DealerStatusProbe(self._count_listings, settle_delay=self._config.settle_delay, on_change=on_change)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    async def retrieve_inventory(self, dealer: Dealer) -> InventoryResult | NoInventoryInfo:
        """Run one bounded aggregation of *dealer*'s used inventory."""
        return await self._aggregator().retrieve(dealer)

    async def search(self, dealer_name: str, qualified_amount: Any) -> SearchOutcome:
        """Resolve *dealer_name*, aggregate its inventory and keep what fits the budget.

        Vehicles come back cheapest first. Listings without a usable price are
        treated as free and always kept.

        Raises
        ------
        InvalidSearchError
            Blank dealer name or a non-positive qualified amount.
        DealerNotFoundError
            The name does not match a dealer with a feed.
        DirectoryRequestFailedError
            The directory could not be queried.
        CatalogRequestFailedError
            The first catalog page failed.
        """
        try:
            request = SearchRequest(dealer_name=dealer_name, qualified_amount=qualified_amount)
        except ValidationError as exc:
            message = str(exc.errors()[0].get("ctx", {}).get("error", exc.errors()[0]["msg"]))
            raise InvalidSearchError(message) from exc

        dealer = await self.resolve_dealer(request.dealer_name)
        retrieved = await self.retrieve_inventory(dealer)

        if isinstance(retrieved, NoInventoryInfo):
            return SearchOutcome(dealer=dealer, no_inventory=retrieved)

        affordable = apply_budget(retrieved.listings, request.qualified_amount)
        vehicles = normalize_listings(affordable)
        _logger.debug(
            "Search %r: retrieved=%d affordable=%d total_found=%d",
            dealer.name,
            len(retrieved.listings),
            len(vehicles),
            retrieved.total_found,
        )
        return SearchOutcome(
            dealer=dealer,
            vehicles=vehicles,
            total_found=retrieved.total_found,
            retrieved=len(retrieved.listings),
            skipped_pages=retrieved.skipped_pages,
        )

    async def run_search(self, session: SearchSession, dealer_name: str, qualified_amount: Any) -> bool:
        """Run :meth:`search` into *session*.

        Errors become the session's terminal error text. Returns ``False``
        when a newer run started meanwhile and this run's result was dropped.
        """
        token = session.begin_run()
        try:
            outcome = await self.search(dealer_name, qualified_amount)
        except LotFinderError as exc:
            _logger.info("Search for %r failed: %s", dealer_name, exc)
            return session.fail_run(token, str(exc))
        except Exception:
            _logger.exception("Unexpected error searching for %r", dealer_name)
            return session.fail_run(token, UNEXPECTED_SEARCH_ERROR)
        return session.finish_run(token, outcome)
