"""Client configuration for lotfinder."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from lotfinder._constants import (
    CATALOG_PAGE_DELAY,
    CATALOG_PAGE_SIZE,
    CATALOG_URL,
    DIRECTORY_TABLE,
    MAX_CATALOG_PAGES,
    RESULTS_PER_PAGE,
    STATUS_SETTLE_DELAY,
    SUGGESTION_LIMIT,
    SUGGESTION_QUIET_PERIOD,
)
from lotfinder.exceptions import LotFinderConfigError

# Credentials and endpoints. The REACT_APP_* names are what the hosted
# environment endpoint serves, so both spellings are accepted.
_ENV_CREDENTIAL_MAP: dict[str, tuple[str, ...]] = {
    "catalog_api_key": ("LOTFINDER_CATALOG_API_KEY", "REACT_APP_MARKETCHECK_API_KEY"),
    "directory_url": ("LOTFINDER_DIRECTORY_URL", "REACT_APP_SUPABASE_URL"),
    "directory_api_key": ("LOTFINDER_DIRECTORY_API_KEY", "REACT_APP_SUPABASE_ANON_KEY"),
}

_ENV_STR_MAP: dict[str, str] = {
    "LOTFINDER_CATALOG_URL": "catalog_url",
    "LOTFINDER_DIRECTORY_TABLE": "directory_table",
}

_ENV_INT_MAP: dict[str, str] = {
    "LOTFINDER_PAGE_SIZE": "page_size",
    "LOTFINDER_MAX_PAGES": "max_pages",
    "LOTFINDER_SUGGESTION_LIMIT": "suggestion_limit",
    "LOTFINDER_RESULTS_PER_PAGE": "results_per_page",
}

_ENV_FLOAT_MAP: dict[str, str] = {
    "LOTFINDER_PAGE_DELAY": "page_delay",
    "LOTFINDER_QUIET_PERIOD": "quiet_period",
    "LOTFINDER_SETTLE_DELAY": "settle_delay",
    "LOTFINDER_REQUEST_TIMEOUT": "request_timeout",
}


@dataclasses.dataclass(frozen=True)
class LotFinderConfig:
    """Client configuration.

    Parameters
    ----------
    catalog_api_key : str
        API key for the catalog inventory API.
    directory_url : str
        Base URL of the dealer directory REST service.
    directory_api_key : str
        Anonymous key for the dealer directory.
    catalog_url : str
        Dealer inventory endpoint of the catalog API.
    directory_table : str
        Directory table holding ``dealer_name`` / ``website`` rows.
    page_size : int
        Catalog rows requested per page.
    max_pages : int
        Maximum catalog pages fetched per aggregation run.
    page_delay : float
        Seconds to wait before each catalog page after the first.
    quiet_period : float
        Seconds the dealer input must be stable before suggestions are fetched.
    settle_delay : float
        Seconds after a dealer selection before its feed is probed.
    suggestion_limit : int
        Maximum number of suggestions returned per lookup.
    results_per_page : int
        Vehicles shown per result page.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    """

    catalog_api_key: str = ""
    directory_url: str = ""
    directory_api_key: str = ""
    catalog_url: str = CATALOG_URL
    directory_table: str = DIRECTORY_TABLE
    page_size: int = CATALOG_PAGE_SIZE
    max_pages: int = MAX_CATALOG_PAGES
    page_delay: float = CATALOG_PAGE_DELAY
    quiet_period: float = SUGGESTION_QUIET_PERIOD
    settle_delay: float = STATUS_SETTLE_DELAY
    suggestion_limit: int = SUGGESTION_LIMIT
    results_per_page: int = RESULTS_PER_PAGE
    request_timeout: float = 30.0

    def missing_fields(self) -> list[str]:
        """Names of required credentials/endpoints that are empty."""
        return [name for name in _ENV_CREDENTIAL_MAP if not str(getattr(self, name) or "").strip()]

    def require_complete(self) -> LotFinderConfig:
        """Return ``self`` or raise :class:`LotFinderConfigError` naming what is missing."""
        missing = self.missing_fields()
        if missing:
            raise LotFinderConfigError(
                "One or more required API keys are missing from the configuration: " + ", ".join(missing)
            )
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], **overrides: Any) -> LotFinderConfig:
        """Create configuration from a flat mapping of ``LOTFINDER_*`` style keys.

        Parameters
        ----------
        values
            Mapping such as ``os.environ`` or a decoded JSON settings document.
        **overrides
            Explicit field values that take precedence over *values*.

        Returns
        -------
        LotFinderConfig
            Populated configuration. Completeness is not checked here.
        """
        config_kwargs: dict[str, Any] = {}

        for field_name, keys in _ENV_CREDENTIAL_MAP.items():
            for key in keys:
                val = values.get(key)
                if val:
                    config_kwargs[field_name] = str(val).strip()
                    break

        for env_key, field_name in _ENV_STR_MAP.items():
            val = values.get(env_key)
            if val:
                config_kwargs[field_name] = str(val)

        # Numeric values are only read when not overridden, so a bad env value
        # cannot break an explicit override.
        for env_key, field_name in _ENV_INT_MAP.items():
            val = values.get(env_key)
            if val not in (None, "") and field_name not in overrides:
                config_kwargs[field_name] = int(val)

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = values.get(env_key)
            if val not in (None, "") and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> LotFinderConfig:
        """Create configuration from environment variables.

        Reads ``LOTFINDER_CATALOG_API_KEY``, ``LOTFINDER_DIRECTORY_URL`` and
        ``LOTFINDER_DIRECTORY_API_KEY`` (or their ``REACT_APP_*`` equivalents)
        plus the optional ``LOTFINDER_*`` tuning variables.
        """
        return cls.from_mapping(os.environ, **overrides)
