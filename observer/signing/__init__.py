"""Wallet identity and ANS-104 data item signing."""

from __future__ import annotations

from .data_item import DataItem, Tag, create_data_item, deep_hash, serialize_tags
from .errors import DataItemError, WalletError
from .wallet import ArweaveWallet, b64url_decode, b64url_encode

__all__ = [
    "ArweaveWallet",
    "DataItem",
    "DataItemError",
    "Tag",
    "WalletError",
    "b64url_decode",
    "b64url_encode",
    "create_data_item",
    "deep_hash",
    "serialize_tags",
]
