"""
Key derivation module.

Turns seeds into keypairs and account identifiers.
"""

from rippletx.crypto.addresses import (
    decode_account_id,
    encode_account_id,
    is_valid_address,
    sha512_half,
)
from rippletx.crypto.keys import (
    KeyAlgorithm,
    KeyPair,
    RootKey,
    Seed,
    derive_keypair,
    derive_root_key,
    generate_seed,
    verify_signature,
)

__all__ = [
    "KeyAlgorithm",
    "KeyPair",
    "RootKey",
    "Seed",
    "decode_account_id",
    "derive_keypair",
    "derive_root_key",
    "encode_account_id",
    "generate_seed",
    "is_valid_address",
    "sha512_half",
    "verify_signature",
]
