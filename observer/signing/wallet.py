"""Arweave wallet identity backed by an RSA-4096 key.

Arweave wallets are JSON Web Keys. The public modulus doubles as the
"owner" field of every signed data item, and the wallet address is the
base64url SHA-256 digest of that modulus.

Usage
-----
>>> wallet = ArweaveWallet.from_jwk_file(Path("/etc/observer/wallet.json"))
>>> wallet.address
'8jfn...'

"""

from __future__ import annotations

import base64
import hashlib
import typing as typ

import msgspec
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import WalletError

if typ.TYPE_CHECKING:
    from pathlib import Path

ARWEAVE_KEY_BITS = 4096
OWNER_LENGTH = ARWEAVE_KEY_BITS // 8
_PSS_SALT_LENGTH = 32


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url text."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode unpadded base64url text."""
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _b64url_int(text: str) -> int:
    return int.from_bytes(b64url_decode(text), "big")


def _int_b64url(value: int) -> str:
    return b64url_encode(value.to_bytes((value.bit_length() + 7) // 8, "big"))


class JsonWebKey(msgspec.Struct, frozen=True):
    """RSA private key in JWK form, as written by Arweave wallet tools."""

    kty: str
    n: str
    e: str
    d: str
    p: str
    q: str
    dp: str
    dq: str
    qi: str


class ArweaveWallet:
    """Signing identity for data items and signed API requests."""

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        """Wrap an RSA private key; the key must be 4096 bits."""
        if private_key.key_size != ARWEAVE_KEY_BITS:
            raise WalletError.unsupported_key_size(private_key.key_size)
        self._private_key = private_key
        self._public_key = private_key.public_key()
        modulus = self._public_key.public_numbers().n
        self._owner = modulus.to_bytes(OWNER_LENGTH, "big")
        self._address = b64url_encode(hashlib.sha256(self._owner).digest())

    @classmethod
    def from_private_key(cls, private_key: rsa.RSAPrivateKey) -> ArweaveWallet:
        """Build a wallet from an existing ``cryptography`` RSA key."""
        return cls(private_key)

    @classmethod
    def from_jwk(cls, raw: bytes | str) -> ArweaveWallet:
        """Build a wallet from JWK JSON text."""
        try:
            jwk = msgspec.json.decode(raw, type=JsonWebKey)
        except msgspec.DecodeError as exc:
            raise WalletError.invalid_jwk(str(exc)) from exc
        if jwk.kty != "RSA":
            raise WalletError.invalid_jwk(f"unsupported key type {jwk.kty!r}")

        try:
            public_numbers = rsa.RSAPublicNumbers(
                e=_b64url_int(jwk.e), n=_b64url_int(jwk.n)
            )
            private_numbers = rsa.RSAPrivateNumbers(
                p=_b64url_int(jwk.p),
                q=_b64url_int(jwk.q),
                d=_b64url_int(jwk.d),
                dmp1=_b64url_int(jwk.dp),
                dmq1=_b64url_int(jwk.dq),
                iqmp=_b64url_int(jwk.qi),
                public_numbers=public_numbers,
            )
            private_key = private_numbers.private_key()
        except ValueError as exc:
            raise WalletError.invalid_jwk(str(exc)) from exc
        return cls(private_key)

    @classmethod
    def from_jwk_file(cls, path: Path) -> ArweaveWallet:
        """Load a wallet from a JWK file on disk."""
        return cls.from_jwk(path.read_bytes())

    def to_jwk(self) -> bytes:
        """Serialize the wallet back to JWK JSON."""
        numbers = self._private_key.private_numbers()
        jwk = JsonWebKey(
            kty="RSA",
            n=_int_b64url(numbers.public_numbers.n),
            e=_int_b64url(numbers.public_numbers.e),
            d=_int_b64url(numbers.d),
            p=_int_b64url(numbers.p),
            q=_int_b64url(numbers.q),
            dp=_int_b64url(numbers.dmp1),
            dq=_int_b64url(numbers.dmq1),
            qi=_int_b64url(numbers.iqmp),
        )
        return msgspec.json.encode(jwk)

    @property
    def owner(self) -> bytes:
        """Return the raw 512-byte public modulus."""
        return self._owner

    @property
    def address(self) -> str:
        """Return the base64url wallet address."""
        return self._address

    def sign(self, message: bytes) -> bytes:
        """Sign ``message`` with RSA-PSS over SHA-256."""
        return self._private_key.sign(message, _pss_padding(), hashes.SHA256())

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return whether ``signature`` is valid for ``message``."""
        try:
            self._public_key.verify(
                signature, message, _pss_padding(), hashes.SHA256()
            )
        except InvalidSignature:
            return False
        return True


def _pss_padding() -> padding.PSS:
    return padding.PSS(
        mgf=padding.MGF1(hashes.SHA256()),
        salt_length=_PSS_SALT_LENGTH,
    )
