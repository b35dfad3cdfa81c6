"""Produce-and-publish cycle driven by the scheduler.

``ReportingService.update_current_report`` is the unit of work the
scheduler fires. It never raises: a failed cycle is logged and the next
scheduled tick tries again.
"""

from __future__ import annotations

import typing as typ

from observer.logging import get_logger, log_exception, log_info, log_warning

from .models import ReportInfo

if typ.TYPE_CHECKING:
    from .producer import ReportProducer
    from .sink import ReportSink

logger = get_logger(__name__)


class ReportingService:
    """Generate the current report and hand it to a sink."""

    def __init__(self, producer: ReportProducer, sink: ReportSink) -> None:
        """Configure the service with a report producer and sink."""
        self._producer = producer
        self._sink = sink
        self._current: ReportInfo | None = None

    @property
    def current_report(self) -> ReportInfo | None:
        """Return the most recently generated report, if any."""
        return self._current

    async def update_current_report(self) -> ReportInfo | None:
        """Generate a report, publish it, and remember the result.

        Returns
        -------
        ReportInfo | None
            The published report info, or ``None`` when generation or
            publication failed.

        """
        try:
            report = await self._producer.generate_report()
        except Exception as exc:
            log_exception(logger, "Report generation failed", exc)
            return None

        report_info = ReportInfo(report=report)
        self._current = report_info

        saved = await self._sink.save_report(report_info)
        if saved is None:
            log_warning(
                logger,
                "Report for epoch %d was not published; retrying next cycle",
                report.epoch_start_height,
            )
            return None

        # A newer cycle may have replaced the current report meanwhile.
        if self._current is report_info:
            self._current = saved
        log_info(
            logger,
            "Report for epoch %d available as %s",
            report.epoch_start_height,
            saved.report_tx_id,
        )
        return saved
