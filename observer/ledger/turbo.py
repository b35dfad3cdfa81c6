"""Turbo bundler client: signed data item uploads and credit balance."""

from __future__ import annotations

import typing as typ
import uuid

import httpx
import msgspec

from observer.signing import b64url_encode

from .errors import LedgerAPIError, LedgerResponseShapeError

if typ.TYPE_CHECKING:
    from observer.signing import ArweaveWallet, DataItem

    from .config import TurboConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400


class UploadReceipt(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Bundler acknowledgement of an accepted data item.

    Attributes
    ----------
    id
        Permanent data item ID.
    owner
        Address of the wallet that signed the item.
    data_caches
        Gateways the bundler pushed the item to for immediate retrieval.
    fast_finality_indexes
        Indexes notified ahead of on-chain settlement.

    """

    id: str
    owner: str
    data_caches: tuple[str, ...] = ()
    fast_finality_indexes: tuple[str, ...] = ()


class _BalanceResponse(msgspec.Struct, frozen=True):
    winc: str


class TurboClient:
    """Upload signed data items and read the wallet's prepaid credit."""

    def __init__(
        self,
        config: TurboConfig,
        wallet: ArweaveWallet,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with service endpoints and a signing wallet."""
        self._config = config
        self._wallet = wallet
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={"User-Agent": config.user_agent},
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def upload_signed_data_item(self, data_item: DataItem) -> UploadReceipt:
        """Upload a signed data item and return the bundler receipt.

        Raises
        ------
        LedgerAPIError
            If the bundler rejects the upload.
        LedgerResponseShapeError
            If the receipt cannot be decoded.

        """
        response = await self._client.post(
            f"{self._config.upload_url}/v1/tx",
            content=data_item.raw,
            headers={"Content-Type": "application/octet-stream"},
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise LedgerAPIError.http_error("Turbo upload", response.status_code)
        try:
            return msgspec.json.decode(response.content, type=UploadReceipt)
        except msgspec.DecodeError as exc:
            raise LedgerResponseShapeError.missing("upload receipt") from exc

    async def get_balance(self) -> int:
        """Return the wallet's remaining credit in winc."""
        response = await self._client.get(
            f"{self._config.payment_url}/v1/balance",
            headers=self._signed_headers(),
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise LedgerAPIError.http_error("Turbo balance", response.status_code)
        try:
            balance = msgspec.json.decode(response.content, type=_BalanceResponse)
            return int(balance.winc)
        except (msgspec.DecodeError, ValueError) as exc:
            raise LedgerResponseShapeError.missing("winc") from exc

    def _signed_headers(self) -> dict[str, str]:
        """Return headers proving ownership of the wallet for this request."""
        nonce = str(uuid.uuid4())
        signature = self._wallet.sign(nonce.encode("utf-8"))
        return {
            "x-public-key": b64url_encode(self._wallet.owner),
            "x-nonce": nonce,
            "x-signature": b64url_encode(signature),
        }
