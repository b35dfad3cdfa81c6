"""Fixed-cadence scheduler for the produce-and-publish cycle.

Every tick spawns the cycle as its own task and immediately returns to
sleeping. Ticks are never skipped or delayed because an earlier cycle is
still running, and a new tick never cancels an in-flight cycle; the
sink's existing-report check is what keeps overlapping cycles for the
same epoch from publishing twice.

Usage
-----
>>> scheduler = ReportScheduler(service.update_current_report)
>>> scheduler.start()
>>> ...
>>> await scheduler.stop()

"""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

from observer.logging import get_logger, log_exception, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

REPORT_GENERATION_INTERVAL = dt.timedelta(hours=2)

Cycle: typ.TypeAlias = "cabc.Callable[[], cabc.Awaitable[object]]"


class ReportScheduler:
    """Fire a cycle once at start-up and then on a fixed interval."""

    def __init__(
        self,
        cycle: Cycle,
        *,
        interval: dt.timedelta = REPORT_GENERATION_INTERVAL,
    ) -> None:
        """Configure the scheduler with the cycle to run and its cadence."""
        if interval <= dt.timedelta(0):
            msg = f"interval must be positive, got: {interval}"
            raise ValueError(msg)
        self._cycle = cycle
        self._interval = interval
        self._in_flight: set[asyncio.Task[object]] = set()
        self._loop_task: asyncio.Task[None] | None = None

    @property
    def in_flight(self) -> frozenset[asyncio.Task[object]]:
        """Return the cycle tasks that have not finished yet."""
        return frozenset(self._in_flight)

    @property
    def running(self) -> bool:
        """Return whether the background loop is active."""
        return self._loop_task is not None and not self._loop_task.done()

    def tick(self) -> asyncio.Task[object]:
        """Spawn one cycle as an independent task and return it."""
        task: asyncio.Task[object] = asyncio.create_task(self._run_cycle())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _run_cycle(self) -> object:
        try:
            return await self._cycle()
        except Exception as exc:
            log_exception(logger, "Scheduled report cycle failed", exc)
            return None

    async def run(self) -> None:
        """Tick immediately, then once per interval until cancelled."""
        seconds = self._interval.total_seconds()
        while True:
            self.tick()
            await asyncio.sleep(seconds)

    def start(self) -> None:
        """Start the loop in the background on the running event loop."""
        if self.running:
            return
        log_info(
            logger,
            "Starting report scheduler (interval_seconds=%d)",
            int(self._interval.total_seconds()),
        )
        self._loop_task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel the loop and any in-flight cycles, waiting for them to end."""
        tasks: list[asyncio.Task[typ.Any]] = list(self._in_flight)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        log_info(logger, "Report scheduler stopped")
