from __future__ import annotations

import pytest

from lotfinder.ingestion.vehicles import normalize_listings
from lotfinder.models.dealer import Dealer, NoInventoryInfo
from lotfinder.models.filters import Filters
from lotfinder.models.requests import SearchOutcome
from lotfinder.session import SearchSession

DEALER = Dealer(name="Acme Motors", website="acme.com")


def _outcome(count: int) -> SearchOutcome:
    raws = [
        {
            "id": f"L{i}",
            "price": 1000 * (i + 1),
            "build": {"make": "Toyota" if i % 2 == 0 else "Honda", "year": 2015 + i % 5},
        }
        for i in range(count)
    ]
    vehicles = normalize_listings(raws)
    return SearchOutcome(dealer=DEALER, vehicles=vehicles, total_found=count, retrieved=count)


def test_begin_run_resets_state() -> None:
    session = SearchSession(results_per_page=5)
    session.finish_run(session.begin_run(), _outcome(12))
    session.set_filters(Filters(make="Toyota"))
    session.go_to_page(2)

    token = session.begin_run()

    assert token == 2
    assert session.vehicles == ()
    assert session.filters.is_empty
    assert session.page == 1
    assert session.loading
    assert session.searched
    assert session.error is None


def test_finish_run_publishes_current_outcome() -> None:
    session = SearchSession(results_per_page=5)
    token = session.begin_run()

    assert session.finish_run(token, _outcome(12))
    assert not session.loading
    assert len(session.vehicles) == 12
    assert session.page_count == 3
    assert [v.id for v in session.visible_vehicles] == ["L0", "L1", "L2", "L3", "L4"]


def test_superseded_run_is_discarded() -> None:
    session = SearchSession()
    stale = session.begin_run()
    fresh = session.begin_run()

    assert not session.finish_run(stale, _outcome(3))
    assert not session.fail_run(stale, "boom")
    assert session.vehicles == ()
    assert session.error is None
    assert session.loading

    assert session.finish_run(fresh, _outcome(2))
    assert len(session.vehicles) == 2


def test_fail_run_records_error() -> None:
    session = SearchSession()
    token = session.begin_run()

    assert session.fail_run(token, "API Request Failed: Invalid API key")
    assert session.error == "API Request Failed: Invalid API key"
    assert session.vehicles == ()
    assert not session.loading


def test_no_inventory_outcome() -> None:
    session = SearchSession()
    info = NoInventoryInfo(
        dealer_name="Acme Motors",
        feed_identifier="acme.com",
        dealer_website="acme.com",
        query_url="https://catalog.test/inventory?source=acme.com",
    )

    session.finish_run(session.begin_run(), SearchOutcome(dealer=DEALER, no_inventory=info))

    assert session.no_inventory == info
    assert session.vehicles == ()
    assert session.page_count == 0
    assert list(session.visible_vehicles) == []


def test_filters_reset_page_and_narrow_results() -> None:
    session = SearchSession(results_per_page=2)
    session.finish_run(session.begin_run(), _outcome(10))
    session.go_to_page(4)
    assert session.page == 4

    session.set_filters(Filters(make="Honda"))

    assert session.page == 1
    assert [v.id for v in session.filtered_vehicles] == ["L1", "L3", "L5", "L7", "L9"]
    assert session.page_count == 3

    session.reset_filters()
    assert len(session.filtered_vehicles) == 10


def test_go_to_page_is_clamped() -> None:
    session = SearchSession(results_per_page=4)
    session.finish_run(session.begin_run(), _outcome(10))

    assert session.go_to_page(99) == 3
    assert [v.id for v in session.visible_vehicles] == ["L8", "L9"]
    assert session.go_to_page(0) == 1


def test_options_follow_results() -> None:
    session = SearchSession()
    session.finish_run(session.begin_run(), _outcome(4))

    assert session.options.makes == ("Honda", "Toyota")
    assert session.options.years == (2018, 2017, 2016, 2015)


def test_new_search_keeps_results() -> None:
    session = SearchSession()
    session.finish_run(session.begin_run(), _outcome(3))

    session.new_search()

    assert not session.searched
    assert len(session.vehicles) == 3


def test_invalid_results_per_page() -> None:
    with pytest.raises(ValueError):
        SearchSession(results_per_page=0)
