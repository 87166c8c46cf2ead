#!/usr/bin/env python3
"""Live dealer inventory search from the terminal.

Credential sourcing: ``LOTFINDER_CATALOG_API_KEY``, ``LOTFINDER_DIRECTORY_URL``,
``LOTFINDER_DIRECTORY_API_KEY`` (or the ``REACT_APP_*`` equivalents), or a
settings endpoint passed with ``--config-url``.

Default behavior:
1) resolve the dealer name (printing suggestions when it does not resolve),
2) probe the dealer feed,
3) aggregate inventory, keep what fits the budget,
4) print one result page, optionally filtered.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import aiohttp  # noqa: E402

from lotfinder import (  # noqa: E402
    DealerNotFoundError,
    Filters,
    LotFinderClient,
    LotFinderConfig,
    LotFinderConfigError,
    SearchSession,
    fetch_remote_config,
)
from lotfinder._transport import HttpTransport  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search a dealer's used inventory within a budget.")
    parser.add_argument("dealer", help="Dealer name as listed in the directory")
    parser.add_argument("amount", nargs="?", default="", help="Qualified amount, e.g. '$25,000'")
    parser.add_argument("--config-url", help="Load credentials from this settings endpoint")
    parser.add_argument("--suggest", action="store_true", help="Only print dealer suggestions")
    parser.add_argument("--check", action="store_true", help="Only probe the dealer feed")
    parser.add_argument("--page", type=int, default=1, help="Result page to print (1-based)")
    parser.add_argument("--year-from", default="")
    parser.add_argument("--year-to", default="")
    parser.add_argument("--max-mileage", default="")
    parser.add_argument("--body-type", default="")
    parser.add_argument("--make", default="")
    parser.add_argument("--model", default="")
    parser.add_argument("--trim", default="")
    parser.add_argument("--options", action="store_true", help="Print available filter options")
    parser.add_argument("--json", action="store_true", help="Print the visible page as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args()


async def _load_config(args: argparse.Namespace) -> LotFinderConfig:
    if not args.config_url:
        return LotFinderConfig.from_env()
    async with aiohttp.ClientSession() as http:
        return await fetch_remote_config(HttpTransport(http), args.config_url)


async def _run(args: argparse.Namespace) -> int:
    try:
        config = (await _load_config(args)).require_complete()
    except LotFinderConfigError as exc:
        print(f"Configuration unavailable: {exc}")
        return 2

    async with LotFinderClient(config) as client:
        if args.suggest:
            for dealer in await client.suggest_dealers(args.dealer):
                print(f"{dealer.name}\t{dealer.website or '-'}")
            return 0

        try:
            dealer = await client.resolve_dealer(args.dealer)
        except DealerNotFoundError as exc:
            print(exc)
            suggestions = await client.suggest_dealers(args.dealer)
            if suggestions:
                print("Did you mean:")
                for suggestion in suggestions:
                    print(f"  {suggestion.name}")
            return 1

        probe = client.status_probe()
        status = await probe.check(dealer)
        print(f"Dealer {dealer.name} ({dealer.website}): {status}")
        if args.check:
            return 0 if probe.search_enabled else 1
        if not probe.search_enabled:
            return 1

        session = SearchSession(results_per_page=config.results_per_page)
        await client.run_search(session, dealer.name, args.amount)
        if session.error:
            print(session.error)
            return 1
        if session.no_inventory is not None:
            info = session.no_inventory
            print(f"No inventory found for {info.dealer_name} ({info.feed_identifier})")
            print(f"URL Used: {info.query_url}")
            return 0

        session.set_filters(
            Filters(
                year_from=args.year_from,
                year_to=args.year_to,
                max_mileage=args.max_mileage,
                body_type=args.body_type,
                make=args.make,
                model=args.model,
                trim=args.trim,
            )
        )
        session.go_to_page(args.page)

        if args.options:
            print(json.dumps(session.options.model_dump(), indent=2))

        vehicles = session.visible_vehicles
        if args.json:
            print(json.dumps([vehicle.model_dump() for vehicle in vehicles], indent=2))
        else:
            for vehicle in vehicles:
                miles = f"{vehicle.miles:,} mi" if vehicle.miles is not None else "N/A mi"
                print(
                    f"${vehicle.price:>10,.0f}  ${vehicle.estimated_monthly_payment:>5,}/mo  "
                    f"{miles:>12}  {vehicle.name}"
                )
        print(
            f"Page {session.page}/{session.page_count} - "
            f"{len(session.filtered_vehicles)} matching of {len(session.vehicles)} in budget"
        )
        if session.skipped_pages:
            print(f"Warning: {len(session.skipped_pages)} catalog page(s) could not be loaded")
        return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
