"""Dealer lookup: as-you-type suggestions, exact resolution and feed probing."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from lotfinder._constants import STATUS_SETTLE_DELAY, SUGGESTION_LIMIT, SUGGESTION_QUIET_PERIOD
from lotfinder._debounce import LatestOnly
from lotfinder.exceptions import (
    DealerNotFoundError,
    DirectoryRequestFailedError,
    LotFinderError,
    LotFinderTransportError,
)
from lotfinder.models.dealer import Dealer, DealerStatus

_logger = logging.getLogger(__name__)

#: Reports how many listings a feed currently holds.
ListingCounter = Callable[[str], Awaitable[int]]


class DealerDirectory(Protocol):
    """Narrow contract of the dealer directory service."""

    async def search(self, partial_name: str, limit: int) -> list[Dealer]:
        """Dealers whose name contains *partial_name* (case-insensitive), in directory order."""
        ...

    async def find(self, name: str) -> list[Dealer]:
        """Candidates for an exact, case-insensitive name match."""
        ...


def _name_key(name: str) -> str:
    return " ".join(name.split()).casefold()


class DealerResolver:
    """Turns typed dealer names into directory entries."""

    def __init__(self, directory: DealerDirectory, *, limit: int = SUGGESTION_LIMIT) -> None:
        self._directory = directory
        self._limit = limit

    async def suggest(self, partial_name: str) -> list[Dealer]:
        """Suggestions for *partial_name*, deduplicated by name.

        Never raises: a failed lookup is logged and yields no suggestions.
        Blank input yields no suggestions without touching the directory.
        """
        query = partial_name.strip()
        if not query:
            return []
        try:
            dealers = await self._directory.search(query, self._limit)
        except LotFinderError:
            _logger.warning("Dealer suggestion lookup failed for %r", query, exc_info=True)
            return []
        except Exception:
            _logger.exception("Unexpected error looking up dealer suggestions for %r", query)
            return []

        # First occurrence fixes the position, the last row for a name wins.
        unique: dict[str, Dealer] = {}
        for dealer in dealers:
            unique[dealer.name] = dealer
        return list(unique.values())[: self._limit]

    async def resolve(self, name: str) -> Dealer:
        """The directory entry exactly matching *name*, which must have a feed.

        Raises
        ------
        DealerNotFoundError
            No exact (case/whitespace-insensitive) match, or the match has no
            website to query.
        DirectoryRequestFailedError
            The directory could not be queried.
        """
        query = name.strip()
        if not query:
            raise DealerNotFoundError(name)
        try:
            candidates = await self._directory.find(query)
        except LotFinderTransportError as exc:
            raise DirectoryRequestFailedError(f"Failed to fetch dealership information: {exc.detail}") from exc

        wanted = _name_key(query)
        for dealer in candidates:
            if _name_key(dealer.name) == wanted and dealer.has_feed:
                _logger.debug("Resolved dealer %r to feed %s", dealer.name, dealer.website)
                return dealer
        raise DealerNotFoundError(query)


class DealerSuggestions:
    """Suggestion list that follows the dealer input as it is typed.

    Lookups wait for the input to be quiet for *quiet_period* seconds; a
    response for an older input never replaces suggestions for a newer one.
    """

    def __init__(
        self,
        resolver: DealerResolver,
        *,
        quiet_period: float = SUGGESTION_QUIET_PERIOD,
        on_change: Callable[[list[Dealer]], None] | None = None,
    ) -> None:
        self._resolver = resolver
        self._scheduler: LatestOnly[list[Dealer]] = LatestOnly(quiet_period, name="suggest")
        self._suggestions: list[Dealer] = []
        self._query = ""
        self._on_change = on_change

    @property
    def suggestions(self) -> list[Dealer]:
        return list(self._suggestions)

    @property
    def query(self) -> str:
        """Input value the current suggestions belong to (or will)."""
        return self._query

    @property
    def loading(self) -> bool:
        return self._scheduler.pending

    def update(self, text: str) -> None:
        """Record a new input value; must run inside the event loop."""
        self._query = text
        if not text.strip():
            self._scheduler.cancel()
            self._set([])
            return
        self._scheduler.submit(lambda: self._resolver.suggest(text), self._set)

    def clear(self) -> None:
        self.update("")

    async def wait(self) -> list[Dealer]:
        """Wait for the pending lookup (if any) and return the suggestions."""
        await self._scheduler.join()
        return self.suggestions

    def _set(self, dealers: list[Dealer]) -> None:
        self._suggestions = list(dealers)
        if self._on_change is not None:
            self._on_change(self.suggestions)


class DealerStatusProbe:
    """Advisory online/offline indicator for the selected dealer's feed.

    The probe only reads the feed's reported listing count; it exists so the
    search action can stay disabled for a feed known to be empty or down.
    Empty and unreachable feeds both end in :attr:`DealerStatus.ERROR`.
    """

    def __init__(
        self,
        count_listings: ListingCounter,
        *,
        settle_delay: float = STATUS_SETTLE_DELAY,
        on_change: Callable[[DealerStatus], None] | None = None,
    ) -> None:
        self._count_listings = count_listings
        self._scheduler: LatestOnly[DealerStatus] = LatestOnly(settle_delay, name="status-probe")
        self._status = DealerStatus.IDLE
        self._dealer: Dealer | None = None
        self._on_change = on_change

    @property
    def status(self) -> DealerStatus:
        return self._status

    @property
    def dealer(self) -> Dealer | None:
        """Current selection, if any."""
        return self._dealer

    @property
    def search_enabled(self) -> bool:
        """False while a probe is running or the feed is known to be unusable."""
        return self._status not in (DealerStatus.CHECKING, DealerStatus.ERROR)

    async def probe(self, dealer: Dealer) -> DealerStatus:
        """Check *dealer*'s feed once, without touching the current status.

        ``ONLINE`` when the feed reports at least one listing, ``ERROR`` when
        it reports none or the request fails. Dealers without a feed are ``IDLE``.
        """
        if not dealer.website:
            return DealerStatus.IDLE
        try:
            total = await self._count_listings(dealer.website)
        except LotFinderError:
            _logger.warning("Dealer status check failed for %s", dealer.website, exc_info=True)
            return DealerStatus.ERROR
        except Exception:
            _logger.exception("Unexpected error checking dealer %s", dealer.website)
            return DealerStatus.ERROR
        _logger.debug("Dealer %s reports %d listings", dealer.website, total)
        return DealerStatus.ONLINE if total > 0 else DealerStatus.ERROR

    def select(self, dealer: Dealer) -> None:
        """A dealer was picked from the suggestions; probe it after the settle delay."""
        self._dealer = dealer
        if not dealer.has_feed:
            self._scheduler.cancel()
            self._set(DealerStatus.IDLE)
            return
        self._set(DealerStatus.CHECKING)
        self._scheduler.submit(lambda: self.probe(dealer), self._set)

    async def check(self, dealer: Dealer) -> DealerStatus:
        """Select *dealer* and wait for the probe result."""
        self.select(dealer)
        await self._scheduler.join()
        return self._status

    def clear(self) -> None:
        """The dealer input changed without a fresh selection."""
        self._dealer = None
        self._scheduler.cancel()
        self._set(DealerStatus.IDLE)

    def _set(self, status: DealerStatus) -> None:
        if status == self._status:
            return
        _logger.debug("Dealer status %s -> %s", self._status, status)
        self._status = status
        if self._on_change is not None:
            self._on_change(status)
