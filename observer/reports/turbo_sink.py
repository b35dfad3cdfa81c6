"""Turbo adapter for the ReportSink protocol.

Publishes each report as a signed ANS-104 data item through the Turbo
bundler, after first asking the Arweave gateway whether this wallet has
already published a report for the same epoch.

The existing-report check is advisory. Two publishers (or two overlapping
cycles in one process) can both miss each other's upload and both
publish; readers resolve this by taking the earliest record by block
height. A failed check never blocks publication.

Usage
-----
>>> deps = TurboReportSinkDependencies(
...     report_lookup=ArweaveGraphQLClient(ArweaveGatewayConfig()),
...     uploader=TurboClient(TurboConfig(), wallet),
...     wallet=wallet,
... )
>>> sink = TurboReportSink(deps)
>>> info = await sink.save_report(ReportInfo(report=report))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .models import ReportInfo, snapshot_report
from .observability import PublicationEventLogger
from .packaging import APP_NAME, package_report

if typ.TYPE_CHECKING:
    from observer.ledger import UploadReceipt
    from observer.signing import ArweaveWallet, DataItem

    from .models import ObserverReport


class ReportLookup(typ.Protocol):
    """Tag-indexed ledger query used to find an already-published report."""

    async def find_first_report_tx_id(
        self,
        *,
        owner: str,
        epoch_start_height: int,
        app_name: str,
    ) -> str | None:
        """Return the earliest matching transaction ID, if any."""
        ...


class DataItemUploader(typ.Protocol):
    """Bundler that accepts signed data items and tracks prepaid credit."""

    async def upload_signed_data_item(self, data_item: DataItem) -> UploadReceipt:
        """Upload ``data_item`` and return the receipt."""
        ...

    async def get_balance(self) -> int:
        """Return the remaining credit in winc."""
        ...


@dc.dataclass(frozen=True, slots=True)
class TurboReportSinkDependencies:
    """Long-lived collaborators shared by every publish attempt.

    Attributes
    ----------
    report_lookup
        Gateway query client used for the existing-report check.
    uploader
        Bundler client used for uploads and balance reads.
    wallet
        Identity that signs reports and owns published records.

    """

    report_lookup: ReportLookup
    uploader: DataItemUploader
    wallet: ArweaveWallet


class TurboReportSink:
    """Publish reports to Arweave via Turbo at most once per epoch."""

    def __init__(
        self,
        dependencies: TurboReportSinkDependencies,
        event_logger: PublicationEventLogger | None = None,
    ) -> None:
        """Configure the sink with its collaborators.

        Parameters
        ----------
        dependencies
            Lookup client, uploader, and signing wallet.
        event_logger
            Structured event logger; a default instance is used when omitted.

        """
        self._report_lookup = dependencies.report_lookup
        self._uploader = dependencies.uploader
        self._wallet = dependencies.wallet
        self._events = event_logger or PublicationEventLogger()

    async def get_report_tx_id(self, report: ObserverReport) -> str | None:
        """Return the earliest published transaction ID for ``report``'s epoch."""
        return await self._report_lookup.find_first_report_tx_id(
            owner=self._wallet.address,
            epoch_start_height=report.epoch_start_height,
            app_name=APP_NAME,
        )

    async def save_report(self, report_info: ReportInfo) -> ReportInfo | None:
        """Publish ``report_info`` unless its epoch is already on the ledger.

        Steps run strictly in sequence: existing-report lookup, packaging,
        upload, then a balance read that happens whether or not the
        upload succeeded.

        Returns
        -------
        ReportInfo | None
            The report info annotated with its transaction ID, or ``None``
            when packaging or upload failed.

        """
        # Lookup and upload both work from one snapshot of the report.
        report = snapshot_report(report_info.report)
        report_info = ReportInfo(report=report, report_tx_id=report_info.report_tx_id)
        height = report.epoch_start_height

        try:
            existing_tx_id = await self.get_report_tx_id(report)
        except Exception as exc:
            self._events.log_lookup_failed(epoch_start_height=height, error=exc)
        else:
            if existing_tx_id is not None:
                self._events.log_report_found(
                    epoch_start_height=height, tx_id=existing_tx_id
                )
                return report_info.with_tx_id(existing_tx_id)

        try:
            data_item = await package_report(report, self._wallet)
            self._events.log_upload_started(
                epoch_start_height=height, size_bytes=len(data_item)
            )
            receipt = await self._uploader.upload_signed_data_item(data_item)
        except Exception as exc:
            self._events.log_publish_failed(epoch_start_height=height, error=exc)
            return None
        else:
            self._events.log_report_published(
                epoch_start_height=height, receipt=receipt
            )
            return report_info.with_tx_id(receipt.id)
        finally:
            await self._observe_balance(height)

    async def _observe_balance(self, epoch_start_height: int) -> None:
        """Log the remaining credit; failures are logged and swallowed."""
        try:
            winc = await self._uploader.get_balance()
        except Exception as exc:
            self._events.log_balance_failed(
                epoch_start_height=epoch_start_height, error=exc
            )
            return
        self._events.log_balance(epoch_start_height=epoch_start_height, winc=winc)
