"""
Deterministic key derivation and signing.

A seed yields a family of keys. Two algorithms are supported:

- secp256k1: the seed produces a root generator, and each account index
  selects a sub-key tweaked from the root public generator. xrpl-py only
  derives index 0, so the family is derived here. Signatures
  are DER-encoded ECDSA over SHA512-half of the message using an RFC 6979
  nonce and low-S normalization.
- ed25519: the seed hashes straight to a private key; the account index
  is ignored. Signatures cover the full message.
"""

import hashlib
import secrets
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.der import UnexpectedDER
from ecdsa.errors import MalformedPointError
from ecdsa.util import sigdecode_der, sigencode_der_canonize
from xrpl.constants import CryptoAlgorithm
from xrpl.core.addresscodec import SEED_LENGTH, XRPLAddressCodecException, decode_seed, encode_seed

from rippletx.crypto.addresses import (
    account_id_from_public_key,
    encode_account_id,
    sha512_half,
)
from rippletx.errors import InvalidSeed, SigningError, UnsupportedAlgorithm, ValueOutOfRange

logger = structlog.get_logger(__name__)

ED25519_PREFIX = b"\xed"

CURVE_ORDER = SECP256k1.order
MAX_ACCOUNT_INDEX = 0xFFFFFFFF

KeyAlgorithm = CryptoAlgorithm


def parse_algorithm(value: Union[str, KeyAlgorithm, None]) -> Optional[KeyAlgorithm]:
    """
    Resolve an algorithm selector.

    Raises:
        UnsupportedAlgorithm: If the selector is not recognised
    """
    if value is None or isinstance(value, KeyAlgorithm):
        return value
    try:
        return KeyAlgorithm(str(value).lower())
    except ValueError:
        raise UnsupportedAlgorithm(value)


@dataclass(frozen=True)
class Seed:
    """
    Secret seed entropy.

    Attributes:
        entropy: 16 bytes of seed entropy
        algorithm: Algorithm implied by the text encoding
    """
    entropy: bytes
    algorithm: KeyAlgorithm = KeyAlgorithm.SECP256K1

    def __post_init__(self):
        if len(self.entropy) != SEED_LENGTH:
            raise InvalidSeed(f"Seed entropy must be {SEED_LENGTH} bytes")

    @classmethod
    def from_text(cls, text: str) -> "Seed":
        """
        Decode checksum-protected seed text.

        Raises:
            InvalidSeed: On bad alphabet, checksum, version or length
        """
        if not text or not text.strip():
            raise InvalidSeed("Empty seed")
        try:
            entropy, algorithm = decode_seed(text.strip())
        except (XRPLAddressCodecException, ValueError) as e:
            raise InvalidSeed(f"Invalid seed encoding: {e}")

        if len(entropy) != SEED_LENGTH:
            raise InvalidSeed("Invalid seed encoding: wrong length")
        return cls(entropy, algorithm)

    def to_text(self) -> str:
        return encode_seed(self.entropy, self.algorithm)

    def __repr__(self) -> str:
        return f"Seed(algorithm={self.algorithm.value}, entropy=<hidden>)"


def generate_seed(algorithm: KeyAlgorithm = KeyAlgorithm.SECP256K1) -> Seed:
    """Create a new random seed."""
    return Seed(secrets.token_bytes(SEED_LENGTH), algorithm)


@dataclass(frozen=True)
class RootKey:
    """secp256k1 root generator derived from a seed."""
    private_scalar: int
    public_key: bytes


@dataclass(frozen=True)
class KeyPair:
    """
    A derived signing key.

    Attributes:
        algorithm: Signing algorithm
        private_key: 32-byte private key
        public_key: 33-byte public key (ed25519 keys carry a 0xED prefix)
        account_id: RIPEMD160(SHA256(public_key))
    """
    algorithm: KeyAlgorithm
    private_key: bytes
    public_key: bytes
    account_id: bytes

    @property
    def address(self) -> str:
        return encode_account_id(self.account_id)

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message with this key.

        Raises:
            SigningError: If the key material does not match the algorithm
        """
        signer = _SIGNERS.get(self.algorithm)
        if signer is None:
            raise SigningError(f"No signer for algorithm {self.algorithm!r}")
        _check_key_shape(self)
        return signer(self.private_key, message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Check a signature against this key's public key."""
        return verify_signature(self.public_key, message, signature)

    def __repr__(self) -> str:
        return (
            f"KeyPair(algorithm={self.algorithm.value}, "
            f"public_key={self.public_key.hex().upper()}, address={self.address})"
        )


def _compressed_public_key(scalar: int) -> bytes:
    signing_key = SigningKey.from_secret_exponent(scalar, curve=SECP256k1)
    return signing_key.get_verifying_key().to_string("compressed")


def _first_valid_scalar(prefix: bytes) -> int:
    """Hash ``prefix || counter`` until the result is a valid curve scalar."""
    counter = 0
    while True:
        candidate = int.from_bytes(sha512_half(prefix + counter.to_bytes(4, "big")), "big")
        if 0 < candidate < CURVE_ORDER:
            return candidate
        counter += 1


def derive_root_key(seed: bytes) -> RootKey:
    """Derive the secp256k1 root generator for a seed."""
    private_scalar = _first_valid_scalar(seed)
    return RootKey(private_scalar, _compressed_public_key(private_scalar))


def _derive_secp256k1(seed: bytes, account_index: int) -> Tuple[bytes, bytes]:
    root = derive_root_key(seed)
    tweak = _first_valid_scalar(root.public_key + account_index.to_bytes(4, "big"))
    private_scalar = (root.private_scalar + tweak) % CURVE_ORDER
    return private_scalar.to_bytes(32, "big"), _compressed_public_key(private_scalar)


def _derive_ed25519(seed: bytes, account_index: int) -> Tuple[bytes, bytes]:
    private_key = sha512_half(seed)
    public_key = Ed25519PrivateKey.from_private_bytes(private_key).public_key()
    raw = public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)
    return private_key, ED25519_PREFIX + raw


def _sign_secp256k1(private_key: bytes, message: bytes) -> bytes:
    signing_key = SigningKey.from_string(private_key, curve=SECP256k1)
    return signing_key.sign_digest_deterministic(
        sha512_half(message),
        hashfunc=hashlib.sha256,
        sigencode=sigencode_der_canonize,
    )


def _sign_ed25519(private_key: bytes, message: bytes) -> bytes:
    return Ed25519PrivateKey.from_private_bytes(private_key).sign(message)


_DERIVERS: Dict[KeyAlgorithm, Callable[[bytes, int], Tuple[bytes, bytes]]] = {
    KeyAlgorithm.SECP256K1: _derive_secp256k1,
    KeyAlgorithm.ED25519: _derive_ed25519,
}

_SIGNERS: Dict[KeyAlgorithm, Callable[[bytes, bytes], bytes]] = {
    KeyAlgorithm.SECP256K1: _sign_secp256k1,
    KeyAlgorithm.ED25519: _sign_ed25519,
}


def _check_key_shape(keypair: KeyPair) -> None:
    is_ed25519_key = keypair.public_key[:1] == ED25519_PREFIX
    if keypair.algorithm == KeyAlgorithm.ED25519 and not is_ed25519_key:
        raise SigningError("ed25519 signing requested with a secp256k1 public key")
    if keypair.algorithm == KeyAlgorithm.SECP256K1 and is_ed25519_key:
        raise SigningError("secp256k1 signing requested with an ed25519 public key")
    if len(keypair.private_key) != 32:
        raise SigningError("Private key must be 32 bytes")


def derive_keypair(
    seed: Union[Seed, str, bytes],
    account_index: int = 0,
    algorithm: Union[str, KeyAlgorithm, None] = None,
) -> KeyPair:
    """
    Derive a keypair from a seed.

    Args:
        seed: Parsed seed, seed text, or raw 16-byte entropy
        account_index: Sub-key index (secp256k1 only)
        algorithm: Algorithm selector; defaults to the one implied by the seed

    Returns:
        The derived KeyPair

    Raises:
        InvalidSeed: If the seed cannot be decoded
        UnsupportedAlgorithm: If the selector is not recognised
        ValueOutOfRange: If the account index does not fit in 32 bits
    """
    if isinstance(seed, str):
        seed = Seed.from_text(seed)
    elif isinstance(seed, bytes):
        seed = Seed(seed)

    selected = parse_algorithm(algorithm) or seed.algorithm
    deriver = _DERIVERS.get(selected)
    if deriver is None:
        raise UnsupportedAlgorithm(selected)

    if not 0 <= account_index <= MAX_ACCOUNT_INDEX:
        raise ValueOutOfRange(f"Account index out of range: {account_index}")

    private_key, public_key = deriver(seed.entropy, account_index)
    keypair = KeyPair(
        algorithm=selected,
        private_key=private_key,
        public_key=public_key,
        account_id=account_id_from_public_key(public_key),
    )

    logger.debug(
        "keypair_derived",
        algorithm=selected.value,
        account_index=account_index,
        address=keypair.address,
    )
    return keypair


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """Verify a signature made by either algorithm. Malformed keys never verify."""
    if public_key[:1] == ED25519_PREFIX:
        try:
            Ed25519PublicKey.from_public_bytes(public_key[1:]).verify(signature, message)
        except (InvalidSignature, ValueError):
            return False
        return True

    try:
        verifying_key = VerifyingKey.from_string(public_key, curve=SECP256k1)
        return verifying_key.verify_digest(
            signature, sha512_half(message), sigdecode=sigdecode_der
        )
    except (BadSignatureError, MalformedPointError, UnexpectedDER, ValueError):
        return False
