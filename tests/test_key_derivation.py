"""
Test suite for key derivation.

Tests seed decoding, keypair derivation for both algorithms, address
encoding, and signature verification.
"""

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from ecdsa import SECP256k1
from ecdsa.util import sigdecode_der

from rippletx.crypto.addresses import (
    account_id_from_public_key,
    decode_account_id,
    encode_account_id,
    is_valid_address,
    sha512_half,
)
from rippletx.crypto.keys import (
    KeyAlgorithm,
    KeyPair,
    Seed,
    derive_keypair,
    derive_root_key,
    generate_seed,
    parse_algorithm,
    verify_signature,
)
from rippletx.errors import (
    InvalidAccount,
    InvalidSeed,
    SigningError,
    UnsupportedAlgorithm,
    ValueOutOfRange,
)

from conftest import (
    GENESIS_ACCOUNT_ID,
    GENESIS_ADDRESS,
    GENESIS_ENTROPY,
    GENESIS_PUBLIC_KEY,
    GENESIS_SEED,
    ZERO_ED25519_SEED,
    ZERO_SECP256K1_SEED,
)

# Second key of the genesis family
GENESIS_INDEX_1_PUBLIC_KEY = "02CD8C4CE87F86AAD1D9D18B03DE28E6E756F040BD72A9C127862833EB90D60BAD"
GENESIS_INDEX_1_ADDRESS = "r4bYF7SLUMD7QgSLLpgJx38WJSY12ViRjP"

# ed25519 key for sixteen zero bytes of entropy
ZERO_ED25519_PUBLIC_KEY = "ED1A7C082846CFF58FF9A892BA4BA2593151CCF1DBA59F37714CC9ED39824AF85F"
ZERO_ED25519_ACCOUNT_ID = "629CCC144AC8464561F11D8870A57DC376A0D191"
ZERO_ED25519_ADDRESS = "r9zRhGr7b6xPekLvT6wP4qNdWMryaumZS7"


# ============================================================================
# Test Seeds
# ============================================================================

class TestSeed:
    """Tests for seed text encoding."""

    def test_decode_genesis_seed(self):
        seed = Seed.from_text(GENESIS_SEED)

        assert seed.entropy == GENESIS_ENTROPY
        assert seed.algorithm == KeyAlgorithm.SECP256K1

    def test_decode_zero_seeds(self):
        secp = Seed.from_text(ZERO_SECP256K1_SEED)
        ed = Seed.from_text(ZERO_ED25519_SEED)

        assert secp.entropy == bytes(16)
        assert secp.algorithm == KeyAlgorithm.SECP256K1
        assert ed.entropy == bytes(16)
        assert ed.algorithm == KeyAlgorithm.ED25519

    def test_encode_round_trip(self):
        assert Seed(bytes(16)).to_text() == ZERO_SECP256K1_SEED
        assert Seed(bytes(16), KeyAlgorithm.ED25519).to_text() == ZERO_ED25519_SEED
        assert Seed.from_text(GENESIS_SEED).to_text() == GENESIS_SEED

    def test_generated_seed_decodes(self):
        seed = generate_seed(KeyAlgorithm.ED25519)
        text = seed.to_text()

        assert text.startswith("sEd")
        assert Seed.from_text(text) == seed

    @pytest.mark.parametrize("text", [
        "",
        "snoPBrXtMeMyMHUVTgbuqAfg1SUTc",   # checksum
        "snoPBrXtMeMyMHUVTgbuqAfg1SUT0",   # alphabet
        GENESIS_ADDRESS,                   # account, not a seed
    ])
    def test_invalid_seed_text(self, text):
        with pytest.raises(InvalidSeed):
            Seed.from_text(text)

    def test_wrong_entropy_length(self):
        with pytest.raises(InvalidSeed, match="16 bytes"):
            Seed(bytes(15))

    def test_repr_hides_entropy(self):
        seed = Seed(GENESIS_ENTROPY)

        assert GENESIS_ENTROPY.hex() not in repr(seed)
        assert "hidden" in repr(seed)


# ============================================================================
# Test Key Derivation
# ============================================================================

class TestKeyDerivation:
    """Tests for deriving keypairs from seeds."""

    def test_genesis_account(self, genesis_keypair):
        assert genesis_keypair.algorithm == KeyAlgorithm.SECP256K1
        assert genesis_keypair.public_key.hex().upper() == GENESIS_PUBLIC_KEY
        assert genesis_keypair.account_id.hex().upper() == GENESIS_ACCOUNT_ID
        assert genesis_keypair.address == GENESIS_ADDRESS

    def test_derivation_is_deterministic(self):
        first = derive_keypair(GENESIS_SEED, account_index=3)
        second = derive_keypair(Seed.from_text(GENESIS_SEED), account_index=3)
        third = derive_keypair(GENESIS_ENTROPY, account_index=3)

        assert first == second == third

    def test_second_account_index(self):
        keypair = derive_keypair(GENESIS_SEED, account_index=1)

        assert keypair.public_key.hex().upper() == GENESIS_INDEX_1_PUBLIC_KEY
        assert keypair.address == GENESIS_INDEX_1_ADDRESS

    def test_account_index_selects_distinct_keys(self):
        keys = {derive_keypair(GENESIS_SEED, account_index=i).public_key for i in range(3)}

        assert len(keys) == 3

    def test_secp256k1_root_key(self):
        root = derive_root_key(GENESIS_ENTROPY)

        assert 0 < root.private_scalar < SECP256k1.order
        assert len(root.public_key) == 33
        assert root.public_key[0] in (0x02, 0x03)

    def test_secp256k1_key_shape(self, genesis_keypair):
        assert len(genesis_keypair.private_key) == 32
        assert len(genesis_keypair.public_key) == 33
        assert genesis_keypair.account_id == account_id_from_public_key(genesis_keypair.public_key)

    def test_ed25519_key_shape(self, ed25519_keypair):
        assert ed25519_keypair.algorithm == KeyAlgorithm.ED25519
        assert ed25519_keypair.private_key == sha512_half(bytes(16))
        assert len(ed25519_keypair.public_key) == 33
        assert ed25519_keypair.public_key[:1] == b"\xed"

        assert ed25519_keypair.public_key.hex().upper() == ZERO_ED25519_PUBLIC_KEY
        assert ed25519_keypair.account_id.hex().upper() == ZERO_ED25519_ACCOUNT_ID
        assert ed25519_keypair.address == ZERO_ED25519_ADDRESS

    def test_ed25519_ignores_account_index(self):
        assert derive_keypair(ZERO_ED25519_SEED, 0) == derive_keypair(ZERO_ED25519_SEED, 7)

    def test_explicit_algorithm_overrides_seed_encoding(self):
        keypair = derive_keypair(ZERO_SECP256K1_SEED, algorithm="ed25519")

        assert keypair.algorithm == KeyAlgorithm.ED25519
        assert keypair.public_key == derive_keypair(ZERO_ED25519_SEED).public_key

    def test_unsupported_algorithm(self):
        with pytest.raises(UnsupportedAlgorithm):
            derive_keypair(GENESIS_SEED, algorithm="rsa")

    def test_parse_algorithm(self):
        assert parse_algorithm(None) is None
        assert parse_algorithm("SECP256K1") == KeyAlgorithm.SECP256K1
        assert parse_algorithm(KeyAlgorithm.ED25519) == KeyAlgorithm.ED25519

    @pytest.mark.parametrize("index", [-1, 1 << 32])
    def test_account_index_out_of_range(self, index):
        with pytest.raises(ValueOutOfRange, match="Account index"):
            derive_keypair(GENESIS_SEED, account_index=index)


# ============================================================================
# Test Signatures
# ============================================================================

class TestSignatures:
    """Tests for signing and verification."""

    def test_secp256k1_signature_is_deterministic_and_canonical(self, genesis_keypair):
        message = b"ripple"
        signature = genesis_keypair.sign(message)

        assert genesis_keypair.sign(message) == signature
        assert signature[0] == 0x30

        _, s = sigdecode_der(signature, SECP256k1.order)
        assert s <= SECP256k1.order // 2

    def test_secp256k1_verify(self, genesis_keypair):
        signature = genesis_keypair.sign(b"ripple")

        assert genesis_keypair.verify(b"ripple", signature) is True
        assert genesis_keypair.verify(b"rippled", signature) is False

    def test_ed25519_signs_full_message(self, ed25519_keypair):
        message = b"ripple" * 100
        signature = ed25519_keypair.sign(message)

        assert len(signature) == 64
        Ed25519PublicKey.from_public_bytes(ed25519_keypair.public_key[1:]).verify(signature, message)
        assert verify_signature(ed25519_keypair.public_key, message, signature) is True

    def test_verify_rejects_garbage(self, genesis_keypair, ed25519_keypair):
        assert verify_signature(genesis_keypair.public_key, b"m", b"\x30\x00") is False
        assert verify_signature(ed25519_keypair.public_key, b"m", bytes(64)) is False
        assert verify_signature(b"\x02" + bytes(32), b"m", b"\x30\x00") is False

    def test_algorithm_key_mismatch(self, genesis_keypair):
        mismatched = KeyPair(
            algorithm=KeyAlgorithm.ED25519,
            private_key=genesis_keypair.private_key,
            public_key=genesis_keypair.public_key,
            account_id=genesis_keypair.account_id,
        )

        with pytest.raises(SigningError):
            mismatched.sign(b"ripple")


# ============================================================================
# Test Addresses
# ============================================================================

class TestAddresses:
    """Tests for the account address codec."""

    def test_round_trip(self):
        account_id = bytes.fromhex(GENESIS_ACCOUNT_ID)

        assert encode_account_id(account_id) == GENESIS_ADDRESS
        assert decode_account_id(GENESIS_ADDRESS) == account_id

    def test_account_zero(self):
        assert encode_account_id(bytes(20)) == "rrrrrrrrrrrrrrrrrrrrrhoLvTp"

    @pytest.mark.parametrize("address", [
        "",
        "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTi",
        "xHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh",
        GENESIS_SEED,
    ])
    def test_invalid_addresses(self, address):
        assert is_valid_address(address) is False
        with pytest.raises(InvalidAccount):
            decode_account_id(address)

    def test_encode_wrong_length(self):
        with pytest.raises(InvalidAccount):
            encode_account_id(bytes(19))
