"""Catalog listing → :class:`Vehicle` normalization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from lotfinder._constants import PAYMENT_TERM_MONTHS
from lotfinder.ingestion.normalize import first_str, round_half_up, safe_float, safe_int, safe_str
from lotfinder.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def listing_price(raw: Mapping[str, Any]) -> float:
    """Numeric price of a raw listing; ``0`` when missing, unparseable or negative."""
    price = safe_float(_mapping(raw).get("price"))
    if price is None or price < 0:
        return 0.0
    return price


def estimated_monthly_payment(price: float) -> int:
    """Flat fixed-term approximation, not an amortized payment."""
    return round_half_up(price / PAYMENT_TERM_MONTHS)


def normalize_listing(raw: Mapping[str, Any], index: int) -> Vehicle:
    """Map one raw catalog record to a :class:`Vehicle`.

    Total and deterministic: any record, however incomplete, yields a
    vehicle. *index* is the record's position in its batch and only feeds
    the synthetic id used when the listing has neither id nor VIN.
    """
    record = _mapping(raw)
    build = _mapping(record.get("build"))
    media = _mapping(record.get("media"))

    vin = safe_str(record.get("vin"))
    price = listing_price(record)

    miles = safe_int(record.get("miles"))
    if miles is not None and miles < 0:
        miles = None

    year = safe_int(build.get("year"))

    return Vehicle(
        id=safe_str(record.get("id")) or vin or f"non-vin-listing-{index}",
        vin=vin or "N/A",
        name=safe_str(record.get("heading")) or "Untitled Vehicle",
        price=price,
        miles=miles,
        estimated_monthly_payment=estimated_monthly_payment(price),
        detail_url=safe_str(record.get("vdp_url")) or "#",
        image_url=first_str(media.get("photo_links")),
        year=year or None,
        body_type=safe_str(record.get("body_type")),
        make=safe_str(build.get("make")),
        model=safe_str(build.get("model")),
        trim=safe_str(build.get("trim")),
    )


def normalize_listings(raws: Iterable[Mapping[str, Any]]) -> tuple[Vehicle, ...]:
    """Normalize a batch, keeping the first listing for any repeated id.

    Offsets can shift while pages are fetched, so the same listing may come
    back on two pages; ids are unique within the returned batch.
    """
    vehicles: list[Vehicle] = []
    seen: set[str] = set()
    for index, raw in enumerate(raws):
        vehicle = normalize_listing(raw, index)
        if vehicle.id in seen:
            _logger.debug("Dropping repeated listing id=%s at index=%d", vehicle.id, index)
            continue
        seen.add(vehicle.id)
        vehicles.append(vehicle)
    return tuple(vehicles)
