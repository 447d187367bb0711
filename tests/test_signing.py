"""
Test suite for transaction signing.

Tests the signing payload layout against a hand-assembled vector, the
sender fields the signer fills in, and the sealed state afterwards.
"""

from dataclasses import FrozenInstanceError

import pytest

from rippletx.codec.serializer import signing_data
from rippletx.config import TxConfig
from rippletx.crypto.keys import verify_signature
from rippletx.errors import InvalidSeed, MissingSeed, SigningError
from rippletx.tx.builder import PaymentParams, TransactionBuilder, TrustSetParams
from rippletx.tx.encoder import TransactionEncoder
from rippletx.tx.models import Payment, TxStatus
from rippletx.tx.signer import TransactionSigner

from conftest import (
    GENESIS_ACCOUNT_ID,
    GENESIS_ADDRESS,
    GENESIS_PUBLIC_KEY,
    GENESIS_SEED,
    ZERO_ED25519_SEED,
)

# Payment of 1000 drops from the genesis account to itself, sequence 1,
# fee 10, in canonical field order
KNOWN_SIGNING_FIELDS = (
    "120000"                                # TransactionType: Payment
    "2200000000"                            # Flags: 0
    "2400000001"                            # Sequence: 1
    "6140000000000003E8"                    # Amount: 1000 drops
    "68400000000000000A"                    # Fee: 10 drops
    "7321" + GENESIS_PUBLIC_KEY             # SigningPubKey
    + "8114" + GENESIS_ACCOUNT_ID           # Account
    + "8314" + GENESIS_ACCOUNT_ID           # Destination
)

# Reference values for the payment above, computed independently of this
# package: RFC 6979 nonce, low-S, DER
KNOWN_SIGNATURE = (
    "3045022100D0058BB50886E9134AE57DA609E96A3DE47F7949024F9CAF3C159853E44040F9"
    "022051440450EAA7C0B71D3182A79690CD6BCB46E1F4940A03A35FDE76C0242B21D9"
)
KNOWN_BLOB = (
    "120000220000000024000000016140000000000003E868400000000000000A"
    "73210330E7FC9D56BB25D6893BA3F317AE5BCF33B3291BD63DB32654A313222F7FD020"
    "7447" + KNOWN_SIGNATURE
    + "8114B5F762798A53D543A014CAF8B297CFF8F2F937E8"
    "8314B5F762798A53D543A014CAF8B297CFF8F2F937E8"
)
KNOWN_HASH = "8DCF7732C90538F311576C66CFE75C22DC4D3C75ABB8090512CA16BE2B080323"


def build_known_payment():
    return TransactionBuilder().build_payment(
        PaymentParams(destination=GENESIS_ADDRESS, amount="1000")
    )


@pytest.fixture
def signer(test_config) -> TransactionSigner:
    signer = TransactionSigner(test_config)
    signer.load_from_config()
    return signer


# ============================================================================
# Test Known Vector
# ============================================================================

class TestKnownVector:
    """Tests for the fixed-seed payment vector."""

    def test_signature_covers_expected_payload(self, signer):
        tx = signer.sign_transaction(build_known_payment())
        payload = bytes.fromhex("53545800" + KNOWN_SIGNING_FIELDS)

        assert verify_signature(tx.signing_pub_key, payload, tx.txn_signature)

    def test_signature_bytes(self, signer):
        tx = signer.sign_transaction(build_known_payment())

        assert tx.txn_signature.hex().upper() == KNOWN_SIGNATURE

    def test_blob_and_content_hash(self, signer):
        tx = signer.sign_transaction(build_known_payment())
        encoded = TransactionEncoder().encode(tx)

        assert encoded.blob_hex == KNOWN_BLOB
        assert encoded.hash_hex == KNOWN_HASH
        assert encoded.to_json()["hash"] == KNOWN_HASH

    def test_signing_is_deterministic(self, test_config):
        first = TransactionSigner(test_config)
        first.load_from_config()
        second = TransactionSigner(test_config)
        second.load_from_config()

        assert (
            first.sign_transaction(build_known_payment()).txn_signature
            == second.sign_transaction(build_known_payment()).txn_signature
        )


# ============================================================================
# Test Transaction Signer
# ============================================================================

class TestTransactionSigner:
    """Tests for transaction signing functionality."""

    def test_signer_not_loaded(self, test_config):
        signer = TransactionSigner(test_config)

        assert signer.is_loaded is False
        assert signer.address is None
        with pytest.raises(MissingSeed):
            signer.sign_transaction(build_known_payment())

    def test_load_from_config_without_seed(self):
        signer = TransactionSigner(TxConfig())

        with pytest.raises(MissingSeed):
            signer.load_from_config()

    def test_load_invalid_seed(self):
        signer = TransactionSigner(TxConfig(seed="not-a-seed"))

        with pytest.raises(InvalidSeed):
            signer.load_from_config()

    def test_sender_fields(self, signer):
        tx = signer.sign_transaction(build_known_payment())

        assert signer.address == GENESIS_ADDRESS
        assert tx.account == bytes.fromhex(GENESIS_ACCOUNT_ID)
        assert tx.sequence == 1
        assert tx.fee == 10
        assert tx.last_ledger_sequence is None
        assert tx.signing_pub_key.hex().upper() == GENESIS_PUBLIC_KEY
        assert tx.status == TxStatus.SIGNED

    def test_default_fee_applies(self):
        signer = TransactionSigner(TxConfig(seed=GENESIS_SEED))
        signer.load_from_config()

        tx = signer.sign_transaction(build_known_payment())

        assert tx.fee == 10
        assert tx.sequence == 0

    def test_explicit_values_override_config(self, signer):
        tx = signer.sign_transaction(
            build_known_payment(), sequence=9, fee=15, last_ledger_sequence=500
        )

        assert tx.sequence == 9
        assert tx.fee == 15
        assert tx.last_ledger_sequence == 500
        assert "201B000001F4" in TransactionEncoder().encode(tx).blob_hex

    def test_zero_last_ledger_sequence_is_omitted(self):
        signer = TransactionSigner(TxConfig(seed=GENESIS_SEED, last_ledger_sequence=0))
        signer.load_from_config()

        tx = signer.sign_transaction(build_known_payment())

        assert tx.last_ledger_sequence is None
        assert "LastLedgerSequence" not in tx.to_json()

    def test_configured_last_ledger_sequence(self):
        signer = TransactionSigner(TxConfig(seed=GENESIS_SEED, last_ledger_sequence=77))
        signer.load_from_config()

        assert signer.sign_transaction(build_known_payment()).last_ledger_sequence == 77

    def test_signed_record_is_sealed(self, signer):
        tx = signer.sign_transaction(build_known_payment())

        with pytest.raises(FrozenInstanceError):
            tx.sequence = 2
        with pytest.raises(SigningError, match="already signed"):
            signer.sign_transaction(tx)

    def test_missing_required_fields(self, signer):
        with pytest.raises(SigningError, match="Destination"):
            signer.sign_transaction(Payment())

    def test_explicit_keypair(self, test_config, ed25519_keypair):
        signer = TransactionSigner(test_config)
        tx = signer.sign_transaction(build_known_payment(), keypair=ed25519_keypair)

        assert tx.account == ed25519_keypair.account_id
        assert tx.signing_pub_key == ed25519_keypair.public_key
        assert len(tx.txn_signature) == 64

    def test_ed25519_signature_verifies(self, test_config):
        signer = TransactionSigner(test_config)
        signer.load_key_from_seed(ZERO_ED25519_SEED)

        tx = signer.sign_transaction(
            TransactionBuilder().build_trust_set(
                TrustSetParams(limit_amount=f"10/USD/{GENESIS_ADDRESS}", options=["noripple"])
            )
        )

        assert verify_signature(tx.signing_pub_key, signing_data(tx.to_json()), tx.txn_signature)
