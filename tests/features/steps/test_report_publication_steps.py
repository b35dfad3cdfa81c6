"""Behavioural coverage for publishing epoch reports."""

from __future__ import annotations

import asyncio
import typing as typ
from unittest import mock

from pytest_bdd import given, parsers, scenario, then, when

from observer.ledger import LedgerAPIError, UploadReceipt
from observer.reports import (
    ObserverReport,
    ReportInfo,
    TurboReportSink,
    TurboReportSinkDependencies,
)

if typ.TYPE_CHECKING:
    from observer.signing import ArweaveWallet

_UPLOAD_ID = "uploaded-tx-id"


class PublicationContext(typ.TypedDict, total=False):
    """Mutable context shared between steps."""

    report: ObserverReport
    lookup: mock.AsyncMock
    uploader: mock.AsyncMock
    result: ReportInfo | None


@scenario(
    "../report_publication.feature",
    "Publish a report that is not on the ledger yet",
)
def test_publish_new_report_scenario() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario(
    "../report_publication.feature",
    "Reuse a report that is already on the ledger",
)
def test_reuse_existing_report_scenario() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario(
    "../report_publication.feature",
    "Publish anyway when the ledger lookup fails",
)
def test_lookup_failure_scenario() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../report_publication.feature", "Report nothing when the upload fails")
def test_upload_failure_scenario() -> None:
    """Wrapper for pytest-bdd scenario."""


@given(
    parsers.parse("a report for epoch {height:d}"),
    target_fixture="publication_context",
)
def given_report(height: int, wallet: ArweaveWallet) -> PublicationContext:
    """Create a report and collaborators that succeed by default."""
    uploader = mock.AsyncMock()
    uploader.upload_signed_data_item = mock.AsyncMock(
        return_value=UploadReceipt(id=_UPLOAD_ID, owner=wallet.address)
    )
    uploader.get_balance = mock.AsyncMock(return_value=1_000_000)
    return {
        "report": ObserverReport(
            observer_address=wallet.address,
            epoch_start_height=height,
            generated_at=1_700_000_000,
        ),
        "lookup": mock.AsyncMock(),
        "uploader": uploader,
    }


@given("the ledger has no report for that epoch")
def given_no_existing_report(publication_context: PublicationContext) -> None:
    """Make the lookup find nothing."""
    publication_context["lookup"].find_first_report_tx_id = mock.AsyncMock(
        return_value=None
    )


@given(parsers.parse('the ledger already holds report "{tx_id}" for that epoch'))
def given_existing_report(
    publication_context: PublicationContext, tx_id: str
) -> None:
    """Make the lookup find an existing transaction."""
    publication_context["lookup"].find_first_report_tx_id = mock.AsyncMock(
        return_value=tx_id
    )


@given("the ledger lookup fails")
def given_lookup_fails(publication_context: PublicationContext) -> None:
    """Make the lookup raise a transport error."""
    publication_context["lookup"].find_first_report_tx_id = mock.AsyncMock(
        side_effect=LedgerAPIError("Arweave GraphQL HTTP 503", status_code=503)
    )


@given("the upload fails")
def given_upload_fails(publication_context: PublicationContext) -> None:
    """Make the bundler reject the upload."""
    publication_context["uploader"].upload_signed_data_item.side_effect = (
        LedgerAPIError("Turbo upload HTTP 402", status_code=402)
    )


@when("I save the report")
def when_save_report(
    publication_context: PublicationContext, wallet: ArweaveWallet
) -> None:
    """Run the sink against the configured collaborators."""
    sink = TurboReportSink(
        TurboReportSinkDependencies(
            report_lookup=publication_context["lookup"],
            uploader=publication_context["uploader"],
            wallet=wallet,
        )
    )
    report_info = ReportInfo(report=publication_context["report"])
    publication_context["result"] = asyncio.run(sink.save_report(report_info))


@then("the report is uploaded once")
def then_uploaded_once(publication_context: PublicationContext) -> None:
    """Exactly one upload was attempted."""
    uploader = publication_context["uploader"]
    uploader.upload_signed_data_item.assert_awaited_once()


@then("nothing is uploaded")
def then_nothing_uploaded(publication_context: PublicationContext) -> None:
    """No upload was attempted."""
    uploader = publication_context["uploader"]
    uploader.upload_signed_data_item.assert_not_awaited()


@then("the returned transaction ID is the upload ID")
def then_upload_id_returned(publication_context: PublicationContext) -> None:
    """The result carries the bundler's ID."""
    result = publication_context["result"]
    assert result is not None, "Expected a report info"
    assert result.report_tx_id == _UPLOAD_ID


@then(parsers.parse('the returned transaction ID is "{tx_id}"'))
def then_tx_id_returned(publication_context: PublicationContext, tx_id: str) -> None:
    """The result carries the given transaction ID."""
    result = publication_context["result"]
    assert result is not None, "Expected a report info"
    assert result.report_tx_id == tx_id


@then("no report info is returned")
def then_no_result(publication_context: PublicationContext) -> None:
    """The sink reported failure."""
    assert publication_context["result"] is None


@then("the balance is read once")
def then_balance_read_once(publication_context: PublicationContext) -> None:
    """The balance read ran exactly once."""
    publication_context["uploader"].get_balance.assert_awaited_once()
