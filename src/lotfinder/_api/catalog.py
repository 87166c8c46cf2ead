"""Catalog inventory endpoint: dealer active inventory.

One query shape serves both callers: the status probe asks for zero rows
and reads only ``num_found``; the aggregator pages through used listings.
"""

from __future__ import annotations

from lotfinder._transport import Transport, build_query_url
from lotfinder.config import LotFinderConfig
from lotfinder.models.catalog import CatalogPage


def build_inventory_params(
    config: LotFinderConfig,
    source: str,
    *,
    rows: int,
    start: int | None = None,
    used_only: bool = True,
    include_non_vin: bool = True,
) -> list[tuple[str, str]]:
    """Query parameters for one inventory request, in the order they are sent."""
    params: list[tuple[str, str]] = [
        ("api_key", config.catalog_api_key),
        ("source", source),
    ]
    if used_only:
        params.append(("car_type", "used"))
    params.append(("rows", str(rows)))
    if start is not None:
        params.append(("start", str(start)))
    if include_non_vin:
        params.append(("include_non_vin_listings", "true"))
    return params


def inventory_query_url(config: LotFinderConfig, source: str, *, rows: int, start: int) -> str:
    return build_query_url(config.catalog_url, build_inventory_params(config, source, rows=rows, start=start))


async def fetch_inventory_page(
    config: LotFinderConfig,
    transport: Transport,
    source: str,
    *,
    rows: int,
    start: int,
) -> CatalogPage:
    """Fetch one page of used inventory (non-VIN listings included).

    Raises
    ------
    LotFinderTransportError
        If the request fails; ``url`` on the error is the query URL.
    """
    url = inventory_query_url(config, source, rows=rows, start=start)
    payload = await transport.get_json(url)
    return CatalogPage.from_response(payload, query_url=url)


async def fetch_total_found(config: LotFinderConfig, transport: Transport, source: str) -> int:
    """Total listings the feed reports for *source*, fetching no rows."""
    params = build_inventory_params(config, source, rows=0, used_only=False, include_non_vin=False)
    url = build_query_url(config.catalog_url, params)
    payload = await transport.get_json(url)
    return CatalogPage.from_response(payload, query_url=url).total_found
