"""Unit tests for the produce-and-publish cycle."""

from __future__ import annotations

import typing as typ
from unittest import mock

import pytest

from observer.reports import ReportInfo, ReportingService

if typ.TYPE_CHECKING:
    from observer.reports import ObserverReport


def _service(
    report: ObserverReport, *, saved: ReportInfo | None
) -> tuple[ReportingService, mock.AsyncMock, mock.AsyncMock]:
    producer = mock.AsyncMock()
    producer.generate_report = mock.AsyncMock(return_value=report)
    sink = mock.AsyncMock()
    sink.save_report = mock.AsyncMock(return_value=saved)
    return ReportingService(producer, sink), producer, sink


class TestUpdateCurrentReport:
    """Tests for ``ReportingService.update_current_report``."""

    @pytest.mark.asyncio
    async def test_publishes_generated_report(self, report: ObserverReport) -> None:
        """The produced report is handed to the sink without a tx ID."""
        saved = ReportInfo(report=report, report_tx_id="tx")
        service, _, sink = _service(report, saved=saved)

        result = await service.update_current_report()

        sink.save_report.assert_awaited_once_with(ReportInfo(report=report))
        assert result == saved
        assert service.current_report == saved

    @pytest.mark.asyncio
    async def test_failed_publication_keeps_unpublished_report(
        self, report: ObserverReport
    ) -> None:
        """The current report stays available even if publishing fails."""
        service, _, _ = _service(report, saved=None)

        assert await service.update_current_report() is None
        assert service.current_report == ReportInfo(report=report)

    @pytest.mark.asyncio
    async def test_generation_failure_is_contained(
        self, report: ObserverReport
    ) -> None:
        """Producer errors are logged and never reach the sink."""
        service, producer, sink = _service(report, saved=None)
        producer.generate_report.side_effect = RuntimeError("gateway down")

        assert await service.update_current_report() is None
        sink.save_report.assert_not_awaited()
        assert service.current_report is None
