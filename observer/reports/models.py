"""Observer report value objects and their canonical encoding.

``ObserverReport`` is produced once per cycle and never mutated. Its JSON
form uses camelCase field names so ledger readers see the same document
shape regardless of which observer implementation published it.

Usage
-----
>>> report = ObserverReport(
...     observer_address="8jfn...",
...     epoch_start_height=1000,
...     generated_at=1700000000,
... )
>>> info = ReportInfo(report=report)
>>> info.with_tx_id("abc123").report_tx_id
'abc123'

"""

from __future__ import annotations

import typing as typ

import msgspec

REPORT_FORMAT_VERSION = 1


class ObserverReport(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Observations gathered for a single epoch.

    Attributes
    ----------
    format_version
        Version of the report document layout.
    observer_address
        Ledger address of the observer that produced the report.
    epoch_start_height
        First block height of the epoch the report covers. This is the
        identity used to detect an already-published report.
    generated_at
        Unix timestamp (seconds) at which the report was generated.
    gateway_assessments
        Per-gateway observation payload. Opaque to the publication pipeline.

    """

    format_version: int = REPORT_FORMAT_VERSION
    observer_address: str
    epoch_start_height: int
    generated_at: int
    gateway_assessments: dict[str, typ.Any] = msgspec.field(default_factory=dict)


class ReportInfo(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A report plus the ledger identifier it was published under, if any."""

    report: ObserverReport
    report_tx_id: str | None = None

    def with_tx_id(self, tx_id: str) -> ReportInfo:
        """Return a copy annotated with the ledger transaction ID."""
        return msgspec.structs.replace(self, report_tx_id=tx_id)


_ENCODER = msgspec.json.Encoder()


def encode_report(report: ObserverReport) -> bytes:
    """Serialize the full report structure to canonical JSON bytes."""
    return _ENCODER.encode(report)


def decode_report(data: bytes | str) -> ObserverReport:
    """Parse JSON bytes produced by :func:`encode_report`."""
    return msgspec.json.decode(data, type=ObserverReport)


def snapshot_report(report: ObserverReport) -> ObserverReport:
    """Return a deep copy that shares no containers with ``report``.

    The struct is frozen but ``gateway_assessments`` is an opaque mapping
    the producer may still hold a reference to; publishing works from a
    snapshot so later changes to that mapping never reach the ledger.
    """
    return decode_report(encode_report(report))
