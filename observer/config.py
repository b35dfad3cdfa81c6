"""Process configuration for the observer.

Usage
-----
>>> import os
>>> os.environ["OBSERVER_WALLET_FILE"] = "/etc/observer/wallet.json"
>>> config = ObserverConfig.from_env()
>>> config.epoch_block_length
5000

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(env_var: str, *, default: bool) -> bool:
    raw = os.environ.get(env_var, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    msg = f"{env_var} must be a boolean, got: {raw!r}"
    raise ValueError(msg)


def _parse_int(env_var: str, default: int, *, minimum: int) -> int:
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{env_var} must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc
    if value < minimum:
        msg = f"{env_var} must be at least {minimum}, got: {value}"
        raise ValueError(msg)
    return value


@dc.dataclass(frozen=True, slots=True)
class ObserverConfig:
    """Configuration for the report scheduler and its publisher.

    Attributes
    ----------
    run_observer
        Whether to schedule report cycles. When false the process only
        serves HTTP endpoints.
    wallet_file
        Path to the Arweave JWK wallet that signs reports. Required when
        ``run_observer`` is true.
    epoch_start_height
        Block height of the first epoch.
    epoch_block_length
        Number of blocks in each epoch.

    """

    run_observer: bool = True
    wallet_file: Path | None = None
    epoch_start_height: int = 0
    epoch_block_length: int = 5000

    def __post_init__(self) -> None:
        """Require a wallet whenever the observer is enabled."""
        if self.run_observer and self.wallet_file is None:
            msg = "OBSERVER_WALLET_FILE is required when OBSERVER_RUN is enabled"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> ObserverConfig:
        """Create configuration from environment variables.

        Reads ``OBSERVER_RUN``, ``OBSERVER_WALLET_FILE``,
        ``OBSERVER_EPOCH_START_HEIGHT`` and ``OBSERVER_EPOCH_BLOCK_LENGTH``.

        Raises
        ------
        ValueError
            If a value cannot be parsed or no wallet is configured while the
            observer is enabled.

        """
        raw_wallet = os.environ.get("OBSERVER_WALLET_FILE", "").strip()
        return cls(
            run_observer=_parse_bool("OBSERVER_RUN", default=True),
            wallet_file=Path(raw_wallet) if raw_wallet else None,
            epoch_start_height=_parse_int(
                "OBSERVER_EPOCH_START_HEIGHT", 0, minimum=0
            ),
            epoch_block_length=_parse_int(
                "OBSERVER_EPOCH_BLOCK_LENGTH", 5000, minimum=1
            ),
        )
