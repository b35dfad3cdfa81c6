"""ReportSink protocol for publishing observer reports.

Adapters implement this port to make a report durable somewhere and hand
back the identifier it was stored under. The protocol is
``runtime_checkable`` so wiring code and tests can use ``isinstance``.

Usage
-----
>>> from observer.reports.sink import ReportSink
>>> isinstance(TurboReportSink(deps), ReportSink)
True

"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from observer.reports.models import ReportInfo


@typ.runtime_checkable
class ReportSink(typ.Protocol):
    """Protocol for durably publishing a report."""

    async def save_report(self, report_info: ReportInfo) -> ReportInfo | None:
        """Publish a report, or find the copy that is already published.

        Parameters
        ----------
        report_info
            The report to publish, without a transaction ID.

        Returns
        -------
        ReportInfo | None
            ``report_info`` annotated with its ledger transaction ID, or
            ``None`` when publication failed. Callers own any retry.

        """
        ...
