"""Report producers: the source of each cycle's ``ObserverReport``.

Gateway assessment content is computed elsewhere; ``EpochReportProducer``
only pins a report to the current epoch and the observer's identity, and
delegates the assessment payload to an injected coroutine.
"""

from __future__ import annotations

import time
import typing as typ

from .models import ObserverReport

if typ.TYPE_CHECKING:
    import collections.abc as cabc

AssessGateways: typ.TypeAlias = "cabc.Callable[[int], cabc.Awaitable[dict[str, typ.Any]]]"


class ReportProducer(typ.Protocol):
    """Compute the report for the current epoch on demand."""

    async def generate_report(self) -> ObserverReport:
        """Return a freshly generated report."""
        ...


class HeightSource(typ.Protocol):
    """Anything that can report the network's current block height."""

    async def get_current_height(self) -> int:
        """Return the current block height."""
        ...


def compute_epoch_start_height(
    height: int, *, epoch_start: int, epoch_blocks: int
) -> int:
    """Return the first block height of the epoch containing ``height``.

    Raises
    ------
    ValueError
        If ``height`` precedes the first epoch or ``epoch_blocks`` is not
        positive.

    """
    if epoch_blocks < 1:
        msg = f"epoch_blocks must be positive, got: {epoch_blocks}"
        raise ValueError(msg)
    if height < epoch_start:
        msg = f"height {height} precedes the first epoch at {epoch_start}"
        raise ValueError(msg)
    return epoch_start + ((height - epoch_start) // epoch_blocks) * epoch_blocks


async def _no_assessments(_epoch_start_height: int) -> dict[str, typ.Any]:
    return {}


class EpochReportProducer:
    """Produce reports keyed to the epoch of the current block height."""

    def __init__(
        self,
        height_source: HeightSource,
        *,
        observer_address: str,
        epoch_start: int = 0,
        epoch_blocks: int = 5000,
        assess: AssessGateways | None = None,
        clock: cabc.Callable[[], float] = time.time,
    ) -> None:
        """Configure epoch arithmetic and the assessment source."""
        self._height_source = height_source
        self._observer_address = observer_address
        self._epoch_start = epoch_start
        self._epoch_blocks = epoch_blocks
        self._assess = assess or _no_assessments
        self._clock = clock

    async def generate_report(self) -> ObserverReport:
        """Return a report for the epoch containing the current height."""
        height = await self._height_source.get_current_height()
        epoch_start_height = compute_epoch_start_height(
            height, epoch_start=self._epoch_start, epoch_blocks=self._epoch_blocks
        )
        assessments = await self._assess(epoch_start_height)
        return ObserverReport(
            observer_address=self._observer_address,
            epoch_start_height=epoch_start_height,
            generated_at=int(self._clock()),
            gateway_assessments=assessments,
        )
