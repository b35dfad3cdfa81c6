"""Clients for the Arweave gateway and the Turbo bundling service."""

from __future__ import annotations

from .config import ArweaveGatewayConfig, TurboConfig
from .errors import LedgerAPIError, LedgerConfigError, LedgerResponseShapeError
from .graphql import ArweaveGraphQLClient
from .turbo import TurboClient, UploadReceipt

__all__ = [
    "ArweaveGatewayConfig",
    "ArweaveGraphQLClient",
    "LedgerAPIError",
    "LedgerConfigError",
    "LedgerResponseShapeError",
    "TurboClient",
    "TurboConfig",
    "UploadReceipt",
]
