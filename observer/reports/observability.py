"""Emit structured observability events for report publication.

``TurboReportSink`` reports every step of a publish attempt through
``PublicationEventLogger`` so each line carries the epoch it concerns.

Usage
-----
>>> event_logger = PublicationEventLogger()
>>> event_logger.log_report_found(epoch_start_height=1000, tx_id="abc123")

"""

from __future__ import annotations

import enum
import typing as typ

from observer.logging import get_logger, log_debug, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from observer.ledger import UploadReceipt

logger = get_logger(__name__)


class PublicationEventType(enum.StrEnum):
    """Structured log event types for report publication."""

    REPORT_FOUND = "publication.report.found"
    LOOKUP_FAILED = "publication.lookup.failed"
    UPLOAD_STARTED = "publication.upload.started"
    REPORT_PUBLISHED = "publication.report.published"
    PUBLISH_FAILED = "publication.report.failed"
    BALANCE_OBSERVED = "publication.balance.observed"
    BALANCE_FAILED = "publication.balance.failed"


class PublicationEventLogger:
    """Emit structured publication events via femtologging."""

    def log_report_found(self, *, epoch_start_height: int, tx_id: str) -> None:
        """Log that a report for the epoch is already on the ledger."""
        log_info(
            logger,
            "[%s] epoch_start_height=%d tx_id=%s",
            PublicationEventType.REPORT_FOUND,
            epoch_start_height,
            tx_id,
        )

    def log_lookup_failed(
        self, *, epoch_start_height: int, error: BaseException
    ) -> None:
        """Log a failed existing-report lookup; publication continues."""
        log_error(
            logger,
            "[%s] epoch_start_height=%d error_type=%s error_message=%s",
            PublicationEventType.LOOKUP_FAILED,
            epoch_start_height,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_upload_started(self, *, epoch_start_height: int, size_bytes: int) -> None:
        """Log the start of a data item upload."""
        log_debug(
            logger,
            "[%s] epoch_start_height=%d size_bytes=%d",
            PublicationEventType.UPLOAD_STARTED,
            epoch_start_height,
            size_bytes,
        )

    def log_report_published(
        self, *, epoch_start_height: int, receipt: UploadReceipt
    ) -> None:
        """Log an accepted upload along with the bundler's receipt.

        Parameters
        ----------
        epoch_start_height
            Epoch the published report covers.
        receipt
            Bundler receipt; data caches and fast finality indexes are
            informational only.

        """
        log_info(
            logger,
            "[%s] epoch_start_height=%d tx_id=%s owner=%s "
            "data_caches=%s fast_finality_indexes=%s",
            PublicationEventType.REPORT_PUBLISHED,
            epoch_start_height,
            receipt.id,
            receipt.owner,
            ",".join(receipt.data_caches),
            ",".join(receipt.fast_finality_indexes),
        )

    def log_publish_failed(
        self, *, epoch_start_height: int, error: BaseException
    ) -> None:
        """Log a packaging or upload failure."""
        log_error(
            logger,
            "[%s] epoch_start_height=%d error_type=%s error_message=%s",
            PublicationEventType.PUBLISH_FAILED,
            epoch_start_height,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_balance(self, *, epoch_start_height: int, winc: int) -> None:
        """Log the remaining upload credit after a publish attempt."""
        log_info(
            logger,
            "[%s] epoch_start_height=%d winc=%d",
            PublicationEventType.BALANCE_OBSERVED,
            epoch_start_height,
            winc,
        )

    def log_balance_failed(
        self, *, epoch_start_height: int, error: BaseException
    ) -> None:
        """Log a failed balance lookup."""
        log_warning(
            logger,
            "[%s] epoch_start_height=%d error_type=%s error_message=%s",
            PublicationEventType.BALANCE_FAILED,
            epoch_start_height,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
