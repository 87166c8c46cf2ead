"""Dealer directory endpoint: ``dealer_site`` rows over a PostgREST API."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from lotfinder._transport import Transport, build_query_url
from lotfinder.config import LotFinderConfig
from lotfinder.models.dealer import Dealer

_logger = logging.getLogger(__name__)

_SELECT = "dealer_name,website"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so user text matches literally.

    ``*`` is PostgREST's wildcard alias and is dropped outright.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "")


def directory_headers(config: LotFinderConfig) -> dict[str, str]:
    return {
        "apikey": config.directory_api_key,
        "authorization": f"Bearer {config.directory_api_key}",
    }


def _table_url(config: LotFinderConfig) -> str:
    return f"{config.directory_url.rstrip('/')}/rest/v1/{config.directory_table}"


def parse_dealer_rows(payload: Any) -> list[Dealer]:
    """Dealers from a directory response, skipping rows without a name."""
    if not isinstance(payload, list):
        return []
    dealers: list[Dealer] = []
    for row in payload:
        if not isinstance(row, dict):
            continue
        try:
            dealers.append(Dealer.model_validate(row))
        except ValidationError:
            _logger.debug("Skipping directory row without dealer name: %r", row)
    return dealers


def _collapse_spaces(value: str) -> str:
    return " ".join(value.split())


def search_params(partial_name: str, *, limit: int) -> list[tuple[str, str]]:
    return [
        ("select", _SELECT),
        ("dealer_name", f"ilike.*{escape_like(_collapse_spaces(partial_name))}*"),
        ("limit", str(limit)),
    ]


def find_params(name: str, *, limit: int) -> list[tuple[str, str]]:
    return [
        ("select", _SELECT),
        ("dealer_name", f"ilike.{escape_like(_collapse_spaces(name))}"),
        ("limit", str(limit)),
    ]


class RestDealerDirectory:
    """:class:`~lotfinder.dealers.DealerDirectory` backed by the directory REST API."""

    def __init__(self, config: LotFinderConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def search(self, partial_name: str, limit: int) -> list[Dealer]:
        """Dealers whose name contains *partial_name*, case-insensitively."""
        url = build_query_url(_table_url(self._config), search_params(partial_name, limit=limit))
        payload = await self._transport.get_json(url, headers=directory_headers(self._config))
        return parse_dealer_rows(payload)

    async def find(self, name: str) -> list[Dealer]:
        """Dealers whose name equals *name*, ignoring case."""
        url = build_query_url(_table_url(self._config), find_params(name, limit=self._config.suggestion_limit))
        payload = await self._transport.get_json(url, headers=directory_headers(self._config))
        return parse_dealer_rows(payload)
