"""Application factory for the observer's Falcon ASGI application.

Usage
-----
Create a probe-only app::

    app = create_app()

Create an app that serves and schedules reports::

    deps = AppDependencies(reporting_service=service, scheduler=scheduler)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from observer.api.resources import (
    CurrentReportResource,
    HealthResource,
    ReadyResource,
)

if typ.TYPE_CHECKING:
    from observer.reports import ReportingService
    from observer.api.lifespan import AsyncCloseable
    from observer.scheduler import ReportScheduler

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    reporting_service
        Service holding the current report; enables ``/reports/current``.
    scheduler
        Scheduler started and stopped with the ASGI lifespan.
    closeables
        Clients closed on shutdown once the scheduler has stopped.

    """

    reporting_service: ReportingService | None = None
    scheduler: ReportScheduler | None = None
    closeables: tuple[AsyncCloseable, ...] = ()


def create_app(dependencies: AppDependencies | None = None) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, only health
        endpoints are available and no reports are scheduled.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []

    if deps.scheduler is not None:
        from observer.api.lifespan import SchedulerLifespan

        middleware.append(SchedulerLifespan(deps.scheduler, deps.closeables))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

    if deps.reporting_service is not None:
        app.add_route(
            "/reports/current", CurrentReportResource(deps.reporting_service)
        )

    return app
