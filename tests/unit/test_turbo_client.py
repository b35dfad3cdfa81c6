"""Unit tests for the Turbo bundler client."""

from __future__ import annotations

import typing as typ

import httpx
import pytest

from observer.ledger import (
    LedgerAPIError,
    LedgerResponseShapeError,
    TurboClient,
    TurboConfig,
    UploadReceipt,
)
from observer.signing import Tag, b64url_decode, b64url_encode, create_data_item

if typ.TYPE_CHECKING:
    from observer.signing import ArweaveWallet

_REJECTED_STATUS = 402


def _make_client(
    wallet: ArweaveWallet,
    responses: dict[str, httpx.Response],
) -> tuple[TurboClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses[request.url.path]

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    client = TurboClient(
        TurboConfig(
            upload_url="https://upload.test",
            payment_url="https://payment.test",
        ),
        wallet,
        http_client=http_client,
    )
    return client, requests


class TestUploadSignedDataItem:
    """Tests for data item uploads."""

    @pytest.mark.asyncio
    async def test_posts_raw_item_bytes(self, wallet: ArweaveWallet) -> None:
        """The signed item is posted as an octet stream to ``/v1/tx``."""
        item = create_data_item(b"payload", wallet, tags=[Tag("k", "v")])
        receipt_json = {
            "id": item.id,
            "owner": wallet.address,
            "dataCaches": ["arweave.net"],
            "fastFinalityIndexes": ["arweave.net"],
            "winc": "0",
        }
        client, requests = _make_client(
            wallet, {"/v1/tx": httpx.Response(200, json=receipt_json)}
        )

        receipt = await client.upload_signed_data_item(item)

        assert requests[0].method == "POST"
        assert requests[0].content == item.raw
        assert requests[0].headers["content-type"] == "application/octet-stream"
        assert receipt == UploadReceipt(
            id=item.id,
            owner=wallet.address,
            data_caches=("arweave.net",),
            fast_finality_indexes=("arweave.net",),
        )

    @pytest.mark.asyncio
    async def test_rejected_upload_raises(self, wallet: ArweaveWallet) -> None:
        """Non-2xx responses raise ``LedgerAPIError``."""
        client, _ = _make_client(
            wallet, {"/v1/tx": httpx.Response(_REJECTED_STATUS, text="Insufficient")}
        )

        with pytest.raises(LedgerAPIError) as excinfo:
            await client.upload_signed_data_item(create_data_item(b"x", wallet))
        assert excinfo.value.status_code == _REJECTED_STATUS

    @pytest.mark.asyncio
    async def test_undecodable_receipt_raises(self, wallet: ArweaveWallet) -> None:
        """Receipts without an ID are rejected."""
        client, _ = _make_client(
            wallet, {"/v1/tx": httpx.Response(200, json={"owner": "x"})}
        )

        with pytest.raises(LedgerResponseShapeError):
            await client.upload_signed_data_item(create_data_item(b"x", wallet))


class TestGetBalance:
    """Tests for balance reads."""

    @pytest.mark.asyncio
    async def test_returns_winc_as_integer(self, wallet: ArweaveWallet) -> None:
        """String winc amounts are converted to integers."""
        client, _ = _make_client(
            wallet,
            {"/v1/balance": httpx.Response(200, json={"winc": "123456789012"})},
        )

        assert await client.get_balance() == 123456789012

    @pytest.mark.asyncio
    async def test_request_is_signed_by_wallet(self, wallet: ArweaveWallet) -> None:
        """Balance requests carry the public key and a signed nonce."""
        client, requests = _make_client(
            wallet, {"/v1/balance": httpx.Response(200, json={"winc": "1"})}
        )

        await client.get_balance()

        headers = requests[0].headers
        assert headers["x-public-key"] == b64url_encode(wallet.owner)
        nonce = headers["x-nonce"].encode("utf-8")
        assert wallet.verify(nonce, b64url_decode(headers["x-signature"]))

    @pytest.mark.asyncio
    async def test_failed_balance_raises(self, wallet: ArweaveWallet) -> None:
        """HTTP errors surface as ``LedgerAPIError``."""
        client, _ = _make_client(wallet, {"/v1/balance": httpx.Response(503)})

        with pytest.raises(LedgerAPIError):
            await client.get_balance()
