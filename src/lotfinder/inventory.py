"""Bounded, sequential aggregation of a dealer's paginated catalog inventory."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from lotfinder._constants import CATALOG_PAGE_DELAY, CATALOG_PAGE_SIZE, MAX_CATALOG_PAGES
from lotfinder._redact import redact_url
from lotfinder.exceptions import CatalogRequestFailedError, LotFinderTransportError
from lotfinder.ingestion.vehicles import listing_price
from lotfinder.models.catalog import CatalogPage, InventoryResult, SkippedPage
from lotfinder.models.dealer import Dealer, NoInventoryInfo

_logger = logging.getLogger(__name__)

#: ``fetch_page(source, rows, start)``; raises LotFinderTransportError on failure.
PageFetcher = Callable[[str, int, int], Awaitable[CatalogPage]]
Sleep = Callable[[float], Awaitable[Any]]


class InventoryAggregator:
    """Pulls a dealer's inventory page by page into one collection.

    Pages are requested one at a time with a fixed pause before each page
    after the first, and never more than ``max_pages`` per run. Only the
    first page is allowed to fail the run; later failures are logged,
    recorded on the result and skipped.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        *,
        page_size: int = CATALOG_PAGE_SIZE,
        max_pages: int = MAX_CATALOG_PAGES,
        page_delay: float = CATALOG_PAGE_DELAY,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if max_pages <= 0:
            raise ValueError(f"max_pages must be positive, got {max_pages}")
        self._fetch_page = fetch_page
        self._page_size = page_size
        self._max_pages = max_pages
        self._page_delay = page_delay
        self._sleep = sleep

    def pages_to_fetch(self, total_found: int) -> int:
        """Pages a run requests for a feed reporting *total_found* listings."""
        if total_found <= 0:
            return 1
        return min(math.ceil(total_found / self._page_size), self._max_pages)

    async def retrieve(self, dealer: Dealer) -> InventoryResult | NoInventoryInfo:
        """Fetch up to ``max_pages`` pages of *dealer*'s used inventory.

        Returns
        -------
        InventoryResult | NoInventoryInfo
            The merged raw listings, or ``NoInventoryInfo`` when the feed
            reports zero listings.

        Raises
        ------
        CatalogRequestFailedError
            The first page failed. Not retried.
        """
        if not dealer.website:
            raise ValueError(f"dealer {dealer.name!r} has no feed identifier")
        source = dealer.website

        try:
            first = await self._fetch_page(source, self._page_size, 0)
        except LotFinderTransportError as exc:
            _logger.warning("First inventory page failed for %s: %s", source, exc)
            raise CatalogRequestFailedError(
                exc.detail,
                query_url=exc.url,
                status_code=exc.status_code,
            ) from exc

        _log_page_error(source, 1, first)

        if first.total_found == 0:
            _logger.debug("No inventory reported for %s", source)
            return NoInventoryInfo(
                dealer_name=dealer.name,
                feed_identifier=source,
                dealer_website=dealer.website,
                query_url=first.query_url,
            )

        listings: list[dict[str, Any]] = list(first.listings[: self._page_size])
        skipped: list[SkippedPage] = []
        total_pages = self.pages_to_fetch(first.total_found)
        _logger.debug(
            "Inventory for %s: total_found=%d pages=%d",
            source,
            first.total_found,
            total_pages,
        )

        for page in range(2, total_pages + 1):
            await self._sleep(self._page_delay)
            start = (page - 1) * self._page_size
            try:
                result = await self._fetch_page(source, self._page_size, start)
            except LotFinderTransportError as exc:
                _logger.warning("Skipping inventory page %d for %s: %s", page, redact_url(exc.url), exc.detail)
                skipped.append(SkippedPage(page=page, start=start, query_url=exc.url, reason=exc.detail))
                continue
            _log_page_error(source, page, result)
            listings.extend(result.listings[: self._page_size])

        return InventoryResult(
            listings=tuple(listings),
            total_found=first.total_found,
            pages_requested=total_pages,
            skipped_pages=tuple(skipped),
            query_url=first.query_url,
        )


def _log_page_error(source: str, page: int, catalog_page: CatalogPage) -> None:
    # A successful response can still carry an error object next to partial data.
    if catalog_page.error_message:
        _logger.warning(
            "Catalog reported an error for %s page %d: %s",
            source,
            page,
            catalog_page.error_message,
        )


def apply_budget(listings: Iterable[Mapping[str, Any]], qualified_amount: float) -> list[Mapping[str, Any]]:
    """Listings priced at or under *qualified_amount*, cheapest first.

    A listing whose price is missing or unparseable counts as ``0`` and is
    therefore always kept. The sort is stable for equal prices.
    """
    affordable = [listing for listing in listings if listing_price(listing) <= qualified_amount]
    affordable.sort(key=listing_price)
    return affordable
