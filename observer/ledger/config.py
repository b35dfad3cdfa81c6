"""Endpoint configuration for the Arweave gateway and Turbo services."""

from __future__ import annotations

import dataclasses as dc
import os

from .errors import LedgerConfigError

_DEFAULT_TIMEOUT_S = 20.0


def _env_url(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw.rstrip("/")


def _env_timeout() -> float:
    raw = os.environ.get("OBSERVER_HTTP_TIMEOUT_S", "").strip()
    if not raw:
        return _DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"OBSERVER_HTTP_TIMEOUT_S must be a number, got: {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"OBSERVER_HTTP_TIMEOUT_S must be positive, got: {value}"
        raise ValueError(msg)
    return value


@dc.dataclass(frozen=True, slots=True)
class ArweaveGatewayConfig:
    """Configuration for the Arweave gateway used for queries."""

    url: str = "https://arweave.net"
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "ar-io-observer/0.0.1"

    def __post_init__(self) -> None:
        """Reject blank gateway URLs."""
        if not self.url.strip():
            raise LedgerConfigError.empty_url("Arweave gateway URL")

    @classmethod
    def from_env(cls) -> ArweaveGatewayConfig:
        """Build configuration from ``OBSERVER_ARWEAVE_URL``."""
        return cls(
            url=_env_url("OBSERVER_ARWEAVE_URL", "https://arweave.net"),
            timeout_s=_env_timeout(),
        )


@dc.dataclass(frozen=True, slots=True)
class TurboConfig:
    """Configuration for the Turbo upload and payment services."""

    upload_url: str = "https://upload.ardrive.io"
    payment_url: str = "https://payment.ardrive.io"
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "ar-io-observer/0.0.1"

    def __post_init__(self) -> None:
        """Reject blank service URLs."""
        if not self.upload_url.strip():
            raise LedgerConfigError.empty_url("Turbo upload URL")
        if not self.payment_url.strip():
            raise LedgerConfigError.empty_url("Turbo payment URL")

    @classmethod
    def from_env(cls) -> TurboConfig:
        """Build configuration from ``OBSERVER_TURBO_*`` variables."""
        return cls(
            upload_url=_env_url(
                "OBSERVER_TURBO_UPLOAD_URL", "https://upload.ardrive.io"
            ),
            payment_url=_env_url(
                "OBSERVER_TURBO_PAYMENT_URL", "https://payment.ardrive.io"
            ),
            timeout_s=_env_timeout(),
        )
