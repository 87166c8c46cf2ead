"""Custom exception hierarchy for lotfinder."""

from __future__ import annotations


class LotFinderError(Exception):
    """Base exception for all lotfinder errors."""


class LotFinderConfigError(LotFinderError):
    """Required credentials or endpoints are missing.

    Fatal for the whole session: nothing can be looked up without them.
    """


class LotFinderTransportError(LotFinderError):
    """HTTP-level failure (network, non-success status, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        detail: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        self.detail = detail or message
        super().__init__(message)


class InvalidSearchError(LotFinderError):
    """The submitted search (dealer name or qualified amount) is unusable."""


class DealerNotFoundError(LotFinderError):
    """No directory entry with a feed identifier matches the typed dealer name.

    Covers both "no exact match" and "match without a website"; the user
    fixes either one the same way, by picking a suggestion.
    """

    def __init__(self, dealer_name: str) -> None:
        self.dealer_name = dealer_name
        super().__init__(
            f'Could not find a website for "{dealer_name}". '
            "Please select a valid dealership from the suggestion list."
        )


class DirectoryRequestFailedError(LotFinderError):
    """The dealer directory could not be queried while resolving a name."""


class CatalogRequestFailedError(LotFinderError):
    """The first catalog page failed; the aggregation run is aborted.

    ``query_url`` is the exact URL that was requested, kept for diagnostics.
    """

    def __init__(
        self,
        detail: str,
        *,
        query_url: str,
        status_code: int | None = None,
    ) -> None:
        self.detail = detail
        self.query_url = query_url
        self.status_code = status_code
        super().__init__(f"API Request Failed: {detail}\n\nURL Used: {query_url}")
