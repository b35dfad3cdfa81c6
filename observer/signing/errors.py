"""Signing and wallet errors."""

from __future__ import annotations


class WalletError(RuntimeError):
    """Raised when an Arweave wallet cannot be loaded or used."""

    @classmethod
    def invalid_jwk(cls, reason: str) -> WalletError:
        """Return an error for a malformed JWK document."""
        return cls(f"Invalid Arweave JWK: {reason}")

    @classmethod
    def unsupported_key_size(cls, bits: int) -> WalletError:
        """Return an error for RSA keys that are not 4096 bits."""
        return cls(f"Arweave wallets must use 4096-bit RSA keys, got {bits}")


class DataItemError(ValueError):
    """Raised when a data item cannot be built from the given inputs."""

    @classmethod
    def invalid_tag(cls, name: str) -> DataItemError:
        """Return an error for tags with empty names or values."""
        return cls(f"Data item tag names and values must be non-empty: {name!r}")

    @classmethod
    def too_many_tags(cls, count: int, limit: int) -> DataItemError:
        """Return an error when the tag count exceeds the ANS-104 limit."""
        return cls(f"Data items carry at most {limit} tags, got {count}")
