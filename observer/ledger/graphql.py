"""Arweave gateway client for tag-indexed lookups and network info."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from .errors import LedgerAPIError, LedgerResponseShapeError

if typ.TYPE_CHECKING:
    from .config import ArweaveGatewayConfig

# Earliest matching transaction by block height; the ledger applies the
# ordering, callers take the first edge as returned.
_FIRST_REPORT_QUERY = """
query($owners: [String!], $tags: [TagFilter!]) {
  transactions(
    sort: HEIGHT_ASC
    first: 1
    owners: $owners
    tags: $tags
  ) {
    edges {
      node {
        id
      }
    }
  }
}
"""

_HTTP_ERROR_STATUS_THRESHOLD = 400

EPOCH_START_HEIGHT_TAG = "AR-IO-Epoch-Start-Height"
APP_NAME_TAG = "App-Name"


def _first_edge_id(payload: object) -> str | None:
    """Return ``data.transactions.edges[0].node.id`` when present."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    transactions = data.get("transactions") if isinstance(data, dict) else None
    edges = (
        transactions.get("edges") if isinstance(transactions, dict) else None
    )
    if not isinstance(edges, list) or not edges:
        return None
    first = edges[0]
    node = first.get("node") if isinstance(first, dict) else None
    tx_id = node.get("id") if isinstance(node, dict) else None
    return tx_id if isinstance(tx_id, str) and tx_id else None


class ArweaveGraphQLClient:
    """Query an Arweave gateway's GraphQL index and info endpoints."""

    def __init__(
        self,
        config: ArweaveGatewayConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided gateway configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def find_first_report_tx_id(
        self,
        *,
        owner: str,
        epoch_start_height: int,
        app_name: str,
    ) -> str | None:
        """Return the earliest report transaction for an epoch, if any.

        Parameters
        ----------
        owner
            Wallet address the report must be signed by.
        epoch_start_height
            Value of the ``AR-IO-Epoch-Start-Height`` tag to match.
        app_name
            Value of the ``App-Name`` tag to match.

        Returns
        -------
        str | None
            The first transaction ID in the order returned by the gateway,
            or ``None`` when no usable edge is returned or the body is not JSON.

        Raises
        ------
        LedgerAPIError
            If the gateway responds with an HTTP error, or with GraphQL
            errors and no usable edge.

        """
        variables = {
            "owners": [owner],
            "tags": [
                {"name": EPOCH_START_HEIGHT_TAG, "values": [str(epoch_start_height)]},
                {"name": APP_NAME_TAG, "values": [app_name]},
            ],
        }
        response = await self._client.post(
            f"{self._config.url}/graphql",
            json={"query": _FIRST_REPORT_QUERY, "variables": variables},
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise LedgerAPIError.http_error("Arweave GraphQL", response.status_code)
        try:
            payload = msgspec.json.decode(response.content)
        except msgspec.DecodeError:
            return None
        # A partial result that still names a record wins over its errors.
        tx_id = _first_edge_id(payload)
        if tx_id is None and isinstance(payload, dict) and payload.get("errors"):
            raise LedgerAPIError.graphql_errors(payload["errors"])
        return tx_id

    async def get_current_height(self) -> int:
        """Return the gateway's current block height from ``/info``."""
        response = await self._client.get(f"{self._config.url}/info")
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise LedgerAPIError.http_error("Arweave info", response.status_code)
        payload = response.json()
        height = payload.get("height") if isinstance(payload, dict) else None
        if not isinstance(height, int) or isinstance(height, bool):
            raise LedgerResponseShapeError.missing("height")
        return height
