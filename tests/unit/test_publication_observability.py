"""Unit tests for publication observability logging."""

from __future__ import annotations

import pytest

from observer.ledger import UploadReceipt
from observer.reports import PublicationEventLogger, PublicationEventType
from tests.helpers.femtologging_capture import capture_femto_logs

_LOGGER_NAME = "observer.reports.observability"


class TestPublicationEventLogger:
    """Tests for ``PublicationEventLogger`` structured log events."""

    @pytest.fixture
    def events(self) -> PublicationEventLogger:
        """Return a fresh publication event logger."""
        return PublicationEventLogger()

    def test_report_found_emits_info(self, events: PublicationEventLogger) -> None:
        """Found reports are logged at INFO with epoch and transaction."""
        with capture_femto_logs(_LOGGER_NAME) as capture:
            events.log_report_found(epoch_start_height=1000, tx_id="abc123")
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "INFO"
            assert PublicationEventType.REPORT_FOUND in record.message
            assert "epoch_start_height=1000" in record.message
            assert "tx_id=abc123" in record.message

    def test_report_published_lists_receipt_fields(
        self, events: PublicationEventLogger
    ) -> None:
        """Published events include the informational receipt fields."""
        receipt = UploadReceipt(
            id="tx",
            owner="me",
            data_caches=("arweave.net", "ar-io.dev"),
            fast_finality_indexes=("arweave.net",),
        )
        with capture_femto_logs(_LOGGER_NAME) as capture:
            events.log_report_published(epoch_start_height=1000, receipt=receipt)
            capture.wait_for_count(1)
            message = capture.records[0].message
            assert PublicationEventType.REPORT_PUBLISHED in message
            assert "data_caches=arweave.net,ar-io.dev" in message
            assert "fast_finality_indexes=arweave.net" in message

    def test_publish_failed_emits_error_with_exc_info(
        self, events: PublicationEventLogger
    ) -> None:
        """Failures are logged at ERROR with the exception attached."""
        error = RuntimeError("bundler unavailable")
        with capture_femto_logs(_LOGGER_NAME) as capture:
            events.log_publish_failed(epoch_start_height=1000, error=error)
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "ERROR"
            assert "error_type=RuntimeError" in record.message
            assert "bundler unavailable" in record.message
            assert record.exc_info is not None

    def test_balance_emits_winc(self, events: PublicationEventLogger) -> None:
        """Balance observations log the remaining credit."""
        with capture_femto_logs(_LOGGER_NAME) as capture:
            events.log_balance(epoch_start_height=1000, winc=987)
            capture.wait_for_count(1)
            assert "winc=987" in capture.records[0].message
