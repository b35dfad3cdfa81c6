"""Observer report generation and publication.

Public API
----------
ObserverReport
    Immutable observations for one epoch.
ReportInfo
    A report plus its ledger transaction ID once published.
ReportSink
    Protocol (port) for durably publishing reports.
TurboReportSink
    Turbo/Arweave adapter with an existing-report check.
TurboReportSinkDependencies
    Frozen dataclass grouping the sink's collaborators.
ReportProducer
    Protocol for the source of each cycle's report.
EpochReportProducer
    Producer that pins reports to the current epoch.
ReportingService
    Produce-and-publish cycle fired by the scheduler.
package_report
    Serialize, compress, tag and sign a report.

"""

from __future__ import annotations

from .models import (
    ObserverReport,
    ReportInfo,
    decode_report,
    encode_report,
    snapshot_report,
)
from .observability import PublicationEventLogger, PublicationEventType
from .packaging import package_report, report_tags
from .producer import EpochReportProducer, ReportProducer, compute_epoch_start_height
from .service import ReportingService
from .sink import ReportSink
from .turbo_sink import TurboReportSink, TurboReportSinkDependencies

__all__ = [
    "EpochReportProducer",
    "ObserverReport",
    "PublicationEventLogger",
    "PublicationEventType",
    "ReportInfo",
    "ReportProducer",
    "ReportSink",
    "ReportingService",
    "TurboReportSink",
    "TurboReportSinkDependencies",
    "compute_epoch_start_height",
    "decode_report",
    "encode_report",
    "package_report",
    "report_tags",
    "snapshot_report",
]
