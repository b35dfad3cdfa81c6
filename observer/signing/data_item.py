"""ANS-104 data items: tagged, signed payloads for Arweave bundlers.

Binary layout of a signed item (integers little-endian)::

    signature type   2 bytes   (1 = Arweave RSA-PSS)
    signature        512 bytes
    owner            512 bytes
    target           1 byte presence flag (+32 bytes when present)
    anchor           1 byte presence flag (+32 bytes when present)
    tag count        8 bytes
    tag byte length  8 bytes
    tags             Avro-encoded array of {name, value} records
    data             remaining bytes

The signature covers the deep hash of every field except itself, and the
item ID is the base64url SHA-256 digest of the signature.
"""

from __future__ import annotations

import hashlib
import typing as typ

import msgspec

from .errors import DataItemError
from .wallet import OWNER_LENGTH, b64url_encode

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .wallet import ArweaveWallet

SIGNATURE_TYPE_ARWEAVE = 1
SIGNATURE_LENGTH = 512
MAX_TAGS = 128

_SIGNATURE_OFFSET = 2
_OWNER_OFFSET = _SIGNATURE_OFFSET + SIGNATURE_LENGTH


class Tag(msgspec.Struct, frozen=True):
    """A single name/value data item tag."""

    name: str
    value: str


DeepHashChunk: typ.TypeAlias = "bytes | cabc.Sequence[DeepHashChunk]"


def _sha384(data: bytes) -> bytes:
    return hashlib.sha384(data).digest()


def deep_hash(chunk: DeepHashChunk) -> bytes:
    """Return the ANS-104 deep hash of a blob or a nested list of blobs."""
    if isinstance(chunk, bytes | bytearray):
        tag = b"blob" + str(len(chunk)).encode("ascii")
        return _sha384(_sha384(tag) + _sha384(bytes(chunk)))

    tag = b"list" + str(len(chunk)).encode("ascii")
    accumulator = _sha384(tag)
    for item in chunk:
        accumulator = _sha384(accumulator + deep_hash(item))
    return accumulator


def _encode_long(value: int) -> bytes:
    """Avro zig-zag variable-length encoding of a 64-bit integer."""
    zigzag = (value << 1) ^ (value >> 63)
    out = bytearray()
    while zigzag & ~0x7F:
        out.append((zigzag & 0x7F) | 0x80)
        zigzag >>= 7
    out.append(zigzag)
    return bytes(out)


def _encode_string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return _encode_long(len(encoded)) + encoded


def serialize_tags(tags: cabc.Sequence[Tag]) -> bytes:
    """Encode tags as an Avro array of ``{name, value}`` records."""
    if not tags:
        return b""
    out = bytearray(_encode_long(len(tags)))
    for tag in tags:
        out += _encode_string(tag.name)
        out += _encode_string(tag.value)
    out += _encode_long(0)
    return bytes(out)


def _signature_payload(
    owner: bytes, tag_bytes: bytes, data: bytes
) -> cabc.Sequence[bytes]:
    return [
        b"dataitem",
        b"1",
        str(SIGNATURE_TYPE_ARWEAVE).encode("ascii"),
        owner,
        b"",  # target
        b"",  # anchor
        tag_bytes,
        data,
    ]


class DataItem:
    """A signed ANS-104 data item ready for upload."""

    def __init__(self, raw: bytes, *, tags: tuple[Tag, ...], data: bytes) -> None:
        """Wrap serialized item bytes along with their decoded parts."""
        self._raw = raw
        self._tags = tags
        self._data = data

    @property
    def raw(self) -> bytes:
        """Return the full binary encoding."""
        return self._raw

    @property
    def signature(self) -> bytes:
        """Return the raw signature bytes."""
        return self._raw[_SIGNATURE_OFFSET:_OWNER_OFFSET]

    @property
    def owner(self) -> bytes:
        """Return the raw owner (public modulus) bytes."""
        return self._raw[_OWNER_OFFSET : _OWNER_OFFSET + OWNER_LENGTH]

    @property
    def id(self) -> str:
        """Return the item ID derived from the signature."""
        return b64url_encode(hashlib.sha256(self.signature).digest())

    @property
    def tags(self) -> tuple[Tag, ...]:
        """Return the tags in signed order."""
        return self._tags

    @property
    def data(self) -> bytes:
        """Return the payload bytes."""
        return self._data

    def __len__(self) -> int:
        """Return the size of the binary encoding in bytes."""
        return len(self._raw)

    def is_valid(self, wallet: ArweaveWallet) -> bool:
        """Verify the signature against ``wallet``'s public key."""
        if self.owner != wallet.owner:
            return False
        message = deep_hash(
            _signature_payload(self.owner, serialize_tags(self._tags), self._data)
        )
        return wallet.verify(message, self.signature)


def create_data_item(
    data: bytes,
    wallet: ArweaveWallet,
    *,
    tags: cabc.Sequence[Tag] = (),
) -> DataItem:
    """Build and sign a data item carrying ``data`` and ``tags``."""
    if len(tags) > MAX_TAGS:
        raise DataItemError.too_many_tags(len(tags), MAX_TAGS)
    for tag in tags:
        if not tag.name or not tag.value:
            raise DataItemError.invalid_tag(tag.name)

    tag_bytes = serialize_tags(tags)
    owner = wallet.owner
    signature = wallet.sign(deep_hash(_signature_payload(owner, tag_bytes, data)))

    raw = b"".join(
        [
            SIGNATURE_TYPE_ARWEAVE.to_bytes(2, "little"),
            signature,
            owner,
            b"\x00",  # no target
            b"\x00",  # no anchor
            len(tags).to_bytes(8, "little"),
            len(tag_bytes).to_bytes(8, "little"),
            tag_bytes,
            data,
        ]
    )
    return DataItem(raw, tags=tuple(tags), data=data)
