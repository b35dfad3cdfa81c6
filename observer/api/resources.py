"""HTTP resources for probes and the current report.

Usage
-----
Register resources on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())
    app.add_route("/reports/current", CurrentReportResource(service))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon
import msgspec

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from observer.reports import ReportingService

__all__ = ["CurrentReportResource", "HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK


class CurrentReportResource:
    """Serve the most recently generated report and its transaction ID.

    Parameters
    ----------
    reporting_service
        Service holding the current report.

    """

    def __init__(self, reporting_service: ReportingService) -> None:
        """Store the reporting service used to look up the current report."""
        self._reporting_service = reporting_service

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /reports/current requests.

        Raises
        ------
        falcon.HTTPNotFound
            If no report has been generated since start-up.

        """
        current = self._reporting_service.current_report
        if current is None:
            raise falcon.HTTPNotFound(
                title="Report not available",
                description="No report has been generated yet",
            )
        resp.media = msgspec.to_builtins(current)
        resp.status = HTTPStatus.OK
