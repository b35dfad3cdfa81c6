"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from observer.reports import ObserverReport
from observer.signing import ArweaveWallet


@pytest.fixture(scope="session")
def wallet() -> ArweaveWallet:
    """Return a freshly generated 4096-bit Arweave wallet.

    Key generation is slow, so one wallet is shared by the whole session.
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=4096)
    return ArweaveWallet.from_private_key(private_key)


@pytest.fixture
def report(wallet: ArweaveWallet) -> ObserverReport:
    """Return a report for the epoch starting at height 1000."""
    return ObserverReport(
        observer_address=wallet.address,
        epoch_start_height=1000,
        generated_at=1_700_000_000,
        gateway_assessments={"gateway.example": {"pass": True}},
    )
