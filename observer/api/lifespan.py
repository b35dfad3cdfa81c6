"""ASGI lifespan middleware that runs the report scheduler.

Starting the scheduler from the ASGI startup event keeps report cycles on
the same event loop as request handling, so a publish in progress never
blocks the HTTP surface.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from observer.scheduler import ReportScheduler

__all__ = ["AsyncCloseable", "SchedulerLifespan"]


class AsyncCloseable(typ.Protocol):
    """Resource released with ``await resource.aclose()``."""

    async def aclose(self) -> None:
        """Release the resource."""
        ...


class SchedulerLifespan:
    """Falcon middleware starting and stopping a ``ReportScheduler``."""

    def __init__(
        self,
        scheduler: ReportScheduler,
        closeables: cabc.Sequence[AsyncCloseable] = (),
    ) -> None:
        """Store the scheduler and the clients to close after it stops."""
        self._scheduler = scheduler
        self._closeables = tuple(closeables)

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Start the scheduler when the server starts."""
        self._scheduler.start()

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Stop the scheduler, then close the clients its cycles used."""
        await self._scheduler.stop()
        for closeable in self._closeables:
            await closeable.aclose()
