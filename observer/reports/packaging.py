"""Turn an observer report into a signed, tagged data item.

The tag set written here is the only discovery surface other ledger
readers have for observer reports, so names and values are fixed.
"""

from __future__ import annotations

import asyncio
import gzip
import typing as typ

from observer.signing import Tag, create_data_item

from .models import encode_report

if typ.TYPE_CHECKING:
    from observer.signing import ArweaveWallet, DataItem

    from .models import ObserverReport

APP_NAME = "AR-IO Observer"
APP_VERSION = "0.0.1"
CONTENT_TYPE = "application/json"
CONTENT_ENCODING = "gzip"
COMPONENT = "observer"


def report_tags(report: ObserverReport) -> tuple[Tag, ...]:
    """Return the tags attached to every published report, in order."""
    return (
        Tag("App-Name", APP_NAME),
        Tag("App-Version", APP_VERSION),
        Tag("Content-Type", CONTENT_TYPE),
        Tag("Content-Encoding", CONTENT_ENCODING),
        Tag("AR-IO-Component", COMPONENT),
        Tag("AR-IO-Epoch-Start-Height", str(report.epoch_start_height)),
    )


def compress_report(report: ObserverReport) -> bytes:
    """Return the gzip-compressed JSON encoding of ``report``."""
    # mtime=0 keeps the gzip header stable for identical reports
    return gzip.compress(encode_report(report), mtime=0)


def _build(report: ObserverReport, wallet: ArweaveWallet) -> DataItem:
    return create_data_item(
        compress_report(report), wallet, tags=report_tags(report)
    )


async def package_report(report: ObserverReport, wallet: ArweaveWallet) -> DataItem:
    """Serialize, compress, tag and sign ``report`` off the event loop."""
    return await asyncio.to_thread(_build, report, wallet)
