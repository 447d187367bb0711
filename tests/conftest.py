"""
Pytest configuration and shared fixtures for the test suite.
"""

import hashlib
import os
from typing import List, Optional

import pytest

from rippletx.config import TxConfig
from rippletx.crypto.keys import KeyPair, derive_keypair
from rippletx.errors import TransportError
from rippletx.node.interface import SubmissionInterface, SubmitResult


# ============================================================================
# Well-known Keys
# ============================================================================

# Genesis account of every new ledger: the seed of "masterpassphrase"
GENESIS_SEED = "snoPBrXtMeMyMHUVTgbuqAfg1SUTb"
GENESIS_ENTROPY = hashlib.sha512(b"masterpassphrase").digest()[:16]
GENESIS_ADDRESS = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
GENESIS_PUBLIC_KEY = "0330E7FC9D56BB25D6893BA3F317AE5BCF33B3291BD63DB32654A313222F7FD020"
GENESIS_ACCOUNT_ID = "B5F762798A53D543A014CAF8B297CFF8F2F937E8"

# Seeds for sixteen zero bytes
ZERO_SECP256K1_SEED = "sp6JS7f14BuwFY8Mw6bTtLKWauoUs"
ZERO_ED25519_SEED = "sEdSJHS4oiAdz7w2X2ni1gFiqtbJHqE"


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep RIPPLETX_* settings and .env files out of tests."""
    for name in list(os.environ):
        if name.upper().startswith("RIPPLETX_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def test_config() -> TxConfig:
    """Create a test configuration."""
    return TxConfig(
        seed=GENESIS_SEED,
        sequence=1,
        fee=10,
        submit_timeout_seconds=5,
        log_level="DEBUG",
    )


@pytest.fixture
def genesis_keypair() -> KeyPair:
    return derive_keypair(GENESIS_SEED)


@pytest.fixture
def ed25519_keypair() -> KeyPair:
    return derive_keypair(ZERO_ED25519_SEED)


# ============================================================================
# Submission Stub
# ============================================================================

class StubSubmission(SubmissionInterface):
    """Records submitted blobs and replies with a canned result or error."""

    def __init__(
        self,
        result: Optional[SubmitResult] = None,
        error: Optional[TransportError] = None,
    ):
        self.result = result or SubmitResult("tesSUCCESS", "The transaction was applied.")
        self.error = error
        self.submitted: List[bytes] = []
        self.connected = False
        self.connect_count = 0

    async def connect(self) -> None:
        self.connected = True
        self.connect_count += 1

    async def disconnect(self) -> None:
        self.connected = False

    async def submit(self, tx_blob: bytes) -> SubmitResult:
        self.submitted.append(tx_blob)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def stub_submission() -> StubSubmission:
    return StubSubmission()
