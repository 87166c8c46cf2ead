from __future__ import annotations

import asyncio

import pytest

from lotfinder._debounce import LatestOnly


@pytest.mark.asyncio
async def test_only_last_submission_runs() -> None:
    scheduler: LatestOnly[str] = LatestOnly(0.02)
    started: list[str] = []
    delivered: list[str] = []

    def make_call(value: str):
        async def call() -> str:
            started.append(value)
            return value

        return call

    for value in ("a", "b", "c"):
        scheduler.submit(make_call(value), delivered.append)

    assert scheduler.pending
    await scheduler.join()

    assert started == ["c"]
    assert delivered == ["c"]
    assert not scheduler.pending


@pytest.mark.asyncio
async def test_tokens_increase_monotonically() -> None:
    scheduler: LatestOnly[int] = LatestOnly(0.0)

    async def call() -> int:
        return 1

    first = scheduler.submit(call, lambda _: None)
    scheduler.cancel()
    second = scheduler.submit(call, lambda _: None)

    assert second > first + 1
    assert scheduler.is_current(second)
    assert not scheduler.is_current(first)
    await scheduler.join()


@pytest.mark.asyncio
async def test_cancel_discards_in_flight_result() -> None:
    scheduler: LatestOnly[str] = LatestOnly(0.0)
    gate = asyncio.Event()
    delivered: list[str] = []

    async def call() -> str:
        await gate.wait()
        return "late"

    scheduler.submit(call, delivered.append)
    await asyncio.sleep(0.01)
    scheduler.cancel()
    gate.set()
    await asyncio.sleep(0.01)

    assert delivered == []


@pytest.mark.asyncio
async def test_failing_call_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    scheduler: LatestOnly[str] = LatestOnly(0.0, name="suggest")
    delivered: list[str] = []

    async def call() -> str:
        raise RuntimeError("nope")

    scheduler.submit(call, delivered.append)
    with caplog.at_level("WARNING"):
        await scheduler.join()

    assert delivered == []
    assert "suggest call failed" in caplog.text
