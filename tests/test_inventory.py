from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from lotfinder.exceptions import CatalogRequestFailedError, LotFinderTransportError
from lotfinder.inventory import InventoryAggregator, apply_budget
from lotfinder.models.catalog import CatalogPage, InventoryResult
from lotfinder.models.dealer import Dealer, NoInventoryInfo

DEALER = Dealer(name="Acme Motors", website="acmemotors.com")


def _url(start: int, rows: int) -> str:
    return f"https://catalog.test/inventory?source=acmemotors.com&rows={rows}&start={start}"


@dataclass
class FakeCatalog:
    """Serves ``total_found`` synthetic listings, optionally failing some offsets."""

    total_found: int
    fail_starts: set[int] = field(default_factory=set)
    oversize_pages: bool = False
    calls: list[tuple[str, int, int]] = field(default_factory=list)

    async def fetch_page(self, source: str, rows: int, start: int) -> CatalogPage:
        self.calls.append((source, rows, start))
        if start in self.fail_starts:
            raise LotFinderTransportError(
                "HTTP 500",
                status_code=500,
                url=_url(start, rows),
                detail="upstream exploded",
            )
        end = min(start + rows, self.total_found)
        if self.oversize_pages:
            end = start + rows * 2
        listings = [{"id": f"L{i}", "price": 1000 + i} for i in range(start, end)]
        return CatalogPage(total_found=self.total_found, listings=listings, query_url=_url(start, rows))


@dataclass
class RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _aggregator(catalog: FakeCatalog, sleep: RecordingSleep, **kwargs: Any) -> InventoryAggregator:
    return InventoryAggregator(catalog.fetch_page, page_size=50, max_pages=10, page_delay=0.25, sleep=sleep, **kwargs)


@pytest.mark.asyncio
async def test_three_pages_two_delays() -> None:
    catalog = FakeCatalog(total_found=120)
    sleep = RecordingSleep()

    result = await _aggregator(catalog, sleep).retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert [start for _, _, start in catalog.calls] == [0, 50, 100]
    assert all(source == "acmemotors.com" and rows == 50 for source, rows, _ in catalog.calls)
    assert sleep.delays == [0.25, 0.25]
    assert len(result.listings) == 120
    assert result.total_found == 120
    assert result.pages_requested == 3
    assert result.is_complete
    assert [item["id"] for item in result.listings[:2]] == ["L0", "L1"]


@pytest.mark.asyncio
async def test_single_page_has_no_delay() -> None:
    catalog = FakeCatalog(total_found=12)
    sleep = RecordingSleep()

    result = await _aggregator(catalog, sleep).retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert len(catalog.calls) == 1
    assert sleep.delays == []
    assert len(result.listings) == 12


@pytest.mark.parametrize("total_found", [1, 49, 50, 51, 499, 500, 501, 5000, 123456])
@pytest.mark.asyncio
async def test_page_ceiling(total_found: int) -> None:
    catalog = FakeCatalog(total_found=total_found)

    result = await _aggregator(catalog, RecordingSleep()).retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert len(catalog.calls) <= 10
    assert len(result.listings) <= 10 * 50
    assert len(result.listings) == min(total_found, 500)


@pytest.mark.asyncio
async def test_oversized_pages_are_capped() -> None:
    catalog = FakeCatalog(total_found=5000, oversize_pages=True)

    result = await _aggregator(catalog, RecordingSleep()).retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert len(result.listings) == 500
    assert not result.is_complete


@pytest.mark.asyncio
async def test_zero_inventory_returns_no_inventory_info() -> None:
    catalog = FakeCatalog(total_found=0)
    sleep = RecordingSleep()

    result = await _aggregator(catalog, sleep).retrieve(DEALER)

    assert result == NoInventoryInfo(
        dealer_name="Acme Motors",
        feed_identifier="acmemotors.com",
        dealer_website="acmemotors.com",
        query_url=_url(0, 50),
    )
    assert len(catalog.calls) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_first_page_failure_is_terminal() -> None:
    catalog = FakeCatalog(total_found=120, fail_starts={0})

    with pytest.raises(CatalogRequestFailedError) as exc_info:
        await _aggregator(catalog, RecordingSleep()).retrieve(DEALER)

    exc = exc_info.value
    assert exc.query_url == _url(0, 50)
    assert exc.status_code == 500
    assert "upstream exploded" in str(exc)
    assert f"URL Used: {_url(0, 50)}" in str(exc)
    assert len(catalog.calls) == 1


@pytest.mark.asyncio
async def test_later_page_failure_is_skipped() -> None:
    catalog = FakeCatalog(total_found=160, fail_starts={50})
    sleep = RecordingSleep()

    result = await _aggregator(catalog, sleep).retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert [start for _, _, start in catalog.calls] == [0, 50, 100, 150]
    assert len(sleep.delays) == 3
    assert len(result.listings) == 110
    assert [(skip.page, skip.start) for skip in result.skipped_pages] == [(2, 50)]
    assert result.skipped_pages[0].reason == "upstream exploded"
    assert not result.is_complete


@pytest.mark.asyncio
async def test_dealer_without_feed_is_rejected() -> None:
    catalog = FakeCatalog(total_found=10)
    with pytest.raises(ValueError):
        await _aggregator(catalog, RecordingSleep()).retrieve(Dealer(name="No Site Motors"))
    assert catalog.calls == []


def test_invalid_aggregator_settings() -> None:
    catalog = FakeCatalog(total_found=0)
    with pytest.raises(ValueError):
        InventoryAggregator(catalog.fetch_page, page_size=0)
    with pytest.raises(ValueError):
        InventoryAggregator(catalog.fetch_page, max_pages=0)


def test_apply_budget_filters_and_sorts() -> None:
    listings = [
        {"id": "a", "price": 30000},
        {"id": "b", "price": "15000"},
        {"id": "c"},
        {"id": "d", "price": 25000},
        {"id": "e", "price": "n/a"},
        {"id": "f", "price": 25000.5},
    ]

    kept = apply_budget(listings, 25000)

    assert [item["id"] for item in kept] == ["c", "e", "b", "d"]


def test_apply_budget_law() -> None:
    listings = [{"id": str(i), "price": price} for i, price in enumerate([5, None, 99999, 12000, "x", 20000])]
    for item in apply_budget(listings, 15000):
        price = item.get("price")
        assert price in (None, "x") or float(price) <= 15000


@pytest.mark.asyncio
async def test_page_error_object_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def fetch_page(source: str, rows: int, start: int) -> CatalogPage:
        return CatalogPage(
            total_found=2,
            listings=[{"id": "L0"}, {"id": "L1"}],
            error_message="Rate limit nearly exhausted",
            query_url=_url(start, rows),
        )

    aggregator = InventoryAggregator(fetch_page, page_size=50, max_pages=10, page_delay=0.25, sleep=RecordingSleep())
    with caplog.at_level(logging.WARNING, logger="lotfinder.inventory"):
        result = await aggregator.retrieve(DEALER)

    assert isinstance(result, InventoryResult)
    assert len(result.listings) == 2
    assert "Catalog reported an error for acmemotors.com page 1: Rate limit nearly exhausted" in caplog.text
