"""Debounced async calls with last-writer-wins result delivery.

A plain debounce only guarantees that fewer calls start; it does not stop
an older call that is already in flight from finishing after a newer one.
:class:`LatestOnly` tags every submission with a monotonic token and hands
a result to its callback only while that token is still the latest.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestOnly(Generic[T]):
    """Run only the most recent of a burst of submissions.

    ``submit`` clears any timer that has not fired yet and starts a new
    one. When the timer fires the call runs; calls already running are not
    cancelled, their results are dropped once a newer submission exists.
    """

    def __init__(self, delay: float, *, name: str = "debounce") -> None:
        self._delay = max(delay, 0.0)
        self._name = name
        self._token = 0
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._latest: asyncio.Task[None] | None = None

    @property
    def token(self) -> int:
        """Token of the latest submission."""
        return self._token

    @property
    def pending(self) -> bool:
        """Whether the latest submission has not delivered yet."""
        return self._timer is not None or (self._latest is not None and not self._latest.done())

    def is_current(self, token: int) -> bool:
        return token == self._token

    def submit(self, call: Callable[[], Awaitable[T]], on_result: Callable[[T], None]) -> int:
        """Schedule *call* after the quiet period; returns its token.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._clear_timer()
        self._token += 1
        token = self._token
        self._timer = loop.call_later(self._delay, self._fire, token, call, on_result)
        return token

    def cancel(self) -> None:
        """Drop the pending timer and invalidate calls already running."""
        self._clear_timer()
        self._token += 1
        self._latest = None

    async def join(self) -> None:
        """Wait until the latest submission has fired and its call has finished.

        Superseded calls still running are not waited for.
        """
        loop = asyncio.get_running_loop()
        while self._timer is not None:
            await asyncio.sleep(max(self._timer.when() - loop.time(), 0.0))
            # Let the timer callback run before checking again.
            await asyncio.sleep(0)
        task = self._latest
        if task is not None and not task.done():
            await asyncio.wait({task})

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, token: int, call: Callable[[], Awaitable[T]], on_result: Callable[[T], None]) -> None:
        self._timer = None
        task = asyncio.create_task(self._run(token, call, on_result))
        self._tasks.add(task)
        self._latest = task
        task.add_done_callback(self._tasks.discard)

    async def _run(self, token: int, call: Callable[[], Awaitable[T]], on_result: Callable[[T], None]) -> None:
        try:
            result = await call()
        except Exception:
            _logger.warning("%s call failed token=%d", self._name, token, exc_info=True)
            return
        if not self.is_current(token):
            _logger.debug("%s discarding stale result token=%d latest=%d", self._name, token, self._token)
            return
        on_result(result)
