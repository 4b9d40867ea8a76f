"""Call reaper: periodically drops calls older than the maximum age."""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from signal_relay.application.ports.clock import Clock, SystemClock
from signal_relay.application.repositories.call import CallRepository

logger = logging.getLogger(__name__)


class CallReaper:
    """Background task sweeping the call store on a fixed interval.

    Removal is purely age based: a call past ``max_age`` goes regardless
    of its status.
    """

    def __init__(
        self,
        calls: CallRepository,
        *,
        interval_seconds: float = 300.0,
        max_age: timedelta = timedelta(hours=1),
        clock: Clock | None = None,
    ) -> None:
        self._calls = calls
        self._interval = interval_seconds
        self._max_age = max_age
        self._clock = clock or SystemClock()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="call-reaper")
        logger.info(
            "Call reaper started (interval=%.0fs, max_age=%.0fs)",
            self._interval, self._max_age.total_seconds(),
        )

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Call reaper stopped")

    def sweep(self) -> list[str]:
        removed = self._calls.sweep_expired(self._max_age, self._clock.now())
        if removed:
            logger.info("Reaped %d expired call(s): %s", len(removed), ", ".join(removed))
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep()
            except Exception:
                logger.exception("Call reaper sweep error")
